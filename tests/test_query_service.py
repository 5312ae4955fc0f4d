"""Tests for QueryService: parameter normalization, request bodies, result conversion."""

import pytest
from shapely.geometry import Point, Polygon, box

from iclient.adapters import ShapelyAdapter
from iclient.common import (
    Bounds,
    DataFormat,
    FilterParameter,
    GeometryPoint,
    QueryByBoundsParameters,
    QueryByDistanceParameters,
    QueryByGeometryParameters,
    QueryBySQLParameters,
    QueryParameters,
    ServerGeometry,
)
from iclient.common.enums import SpatialQueryMode
from iclient.services import QueryService, query_service

URL = "http://iserver.example.com:8090/iserver/services/map-world/rest/maps/World"


@pytest.fixture
def service(iserver):
    return QueryService(URL, transport=iserver.transport)


class TestProcessParams:

    def test_return_content_defaults_to_true(self, service):
        params = QueryBySQLParameters(query_params=FilterParameter(name="Countries@World"))
        assert params.return_content is None

        processed = service._process_params(params)

        assert processed.return_content is True

    def test_explicit_return_content_is_kept(self, service):
        params = QueryBySQLParameters(return_content=False)

        assert service._process_params(params).return_content is False

    def test_single_filter_is_wrapped_in_list(self, service):
        query_filter = FilterParameter(name="Countries@World")
        params = QueryBySQLParameters(query_params=query_filter)

        processed = service._process_params(params)

        assert processed.query_params == [query_filter]

    def test_filter_list_is_kept(self, service):
        filters = [FilterParameter(name="A@World"), FilterParameter(name="B@World")]

        processed = service._process_params(QueryBySQLParameters(query_params=filters))

        assert processed.query_params == filters

    def test_none_params_become_defaults(self, service):
        processed = service._process_params(None, QueryByBoundsParameters)

        assert isinstance(processed, QueryByBoundsParameters)
        assert processed.bounds is None
        assert processed.return_content is True

    def test_none_params_default_class(self, service):
        processed = service._process_params(None)

        assert type(processed) is QueryParameters
        assert processed.return_content is True

    def test_bounds_converted_by_adapter(self, service):
        params = QueryByBoundsParameters(bounds=[0, 0, 60, 39])

        processed = service._process_params(params)

        assert processed.bounds == Bounds(0, 0, 60, 39)

    def test_point_converted_by_adapter(self, service):
        params = QueryByDistanceParameters(geometry=(104, 30), distance=10)

        processed = service._process_params(params)

        assert processed.geometry == GeometryPoint(104.0, 30.0)


class TestQueryBySQL:

    def test_posts_sql_query(self, service, iserver, results):
        params = QueryBySQLParameters(
            query_params=FilterParameter(name="Capitals@World", attribute_filter="SMID < 10"),
        )

        returned = service.query_by_sql(params, results)

        assert returned is service
        request = iserver.last_request
        assert request.method == "POST"
        assert request.url.path.endswith("/maps/World/queryResults.json")
        assert request.url.params["returnContent"] == "true"
        body = iserver.last_body
        assert body["queryMode"] == "SqlQuery"
        query_parameters = body["queryParameters"]
        assert query_parameters["queryParams"] == [{"name": "Capitals@World", "attributeFilter": "SMID < 10"}]
        assert query_parameters["expectCount"] == 100000
        assert query_parameters["networkType"] == "LINE"
        assert query_parameters["queryOption"] == "ATTRIBUTEANDGEOMETRY"
        assert query_parameters["startRecord"] == 0
        assert query_parameters["holdTime"] == 10

    def test_result_is_geojson_by_default(self, service, results):
        params = QueryBySQLParameters(query_params=FilterParameter(name="Capitals@World"))

        service.query_by_sql(params, results)

        event = results.events[0]
        assert event.type == "processCompleted"
        collection = event.result["recordsets"][0]["features"]
        assert collection["type"] == "FeatureCollection"
        feature = collection["features"][0]
        assert feature["geometry"] == {"type": "Point", "coordinates": [116.4, 39.9]}
        assert feature["properties"] == {"SMID": "1", "NAME": "北京"}

    def test_iserver_format_keeps_raw_features(self, service, results):
        params = QueryBySQLParameters(query_params=FilterParameter(name="Capitals@World"))

        service.query_by_sql(params, results, DataFormat.ISERVER)

        features = results.events[0].result["recordsets"][0]["features"]
        assert isinstance(features, list)
        assert features[0]["fieldNames"] == ["SMID", "NAME"]

    def test_return_content_false_returns_resource_info(self, service, iserver, results):
        params = QueryBySQLParameters(
            query_params=FilterParameter(name="Capitals@World"),
            return_content=False,
        )

        service.query_by_sql(params, results)

        assert iserver.last_request.url.params["returnContent"] == "false"
        assert results.events[0].result["newResourceID"] == "abc"

    def test_empty_query_params_fail(self, service, results):
        service.query_by_sql(QueryBySQLParameters(), results)

        event = results.events[0]
        assert event.type == "processFailed"
        assert event.result == {"error": {"code": 400, "errorMsg": "queryParams is empty"}}


class TestQueryByBounds:

    def test_posts_bounds(self, service, iserver, results):
        params = QueryByBoundsParameters(
            query_params=[FilterParameter(name="Capitals@World")],
            bounds={"left": 0, "bottom": 0, "right": 60, "top": 39},
        )

        service.query_by_bounds(params, results)

        body = iserver.last_body
        assert body["queryMode"] == "BoundsQuery"
        assert body["bounds"] == {"leftBottom": {"x": 0, "y": 0}, "rightTop": {"x": 60, "y": 39}}
        assert results.events[0].type == "processCompleted"

    def test_shapely_bounds(self, iserver, results):
        service = QueryService(URL, transport=iserver.transport, adapter=ShapelyAdapter())
        params = QueryByBoundsParameters(
            query_params=FilterParameter(name="Capitals@World"),
            bounds=box(0, 0, 60, 39),
        )

        service.query_by_bounds(params, results)

        assert iserver.last_body["bounds"]["rightTop"] == {"x": 60.0, "y": 39.0}


class TestQueryByDistance:

    def test_distance_query(self, service, iserver, results):
        params = QueryByDistanceParameters(
            query_params=FilterParameter(name="Capitals@World"),
            distance=10,
            geometry={"type": "Point", "coordinates": [104, 30]},
        )

        service.query_by_distance(params, results)

        body = iserver.last_body
        assert body["queryMode"] == "DistanceQuery"
        assert body["distance"] == 10
        assert body["geometry"]["type"] == "POINT"
        assert body["geometry"]["points"] == [{"x": 104.0, "y": 30.0}]

    def test_nearest_query(self, service, iserver, results):
        params = QueryByDistanceParameters(
            query_params=FilterParameter(name="Capitals@World"),
            distance=10,
            geometry=(104, 30),
            is_nearest=True,
        )

        service.query_by_distance(params, results)

        assert iserver.last_body["queryMode"] == "FindNearest"


class TestQueryByGeometry:

    def test_polygon_query(self, iserver, results):
        service = query_service(URL, {"adapter": ShapelyAdapter(), "transport": iserver.transport})
        params = QueryByGeometryParameters(
            query_params=FilterParameter(name="Countries@World"),
            geometry=Polygon([(0, 0), (60, 0), (60, 39), (0, 39), (0, 0)]),
        )

        service.query_by_geometry(params, results)

        body = iserver.last_body
        assert body["queryMode"] == "SpatialQuery"
        assert body["spatialQueryMode"] == "INTERSECT"
        assert body["geometry"]["type"] == "REGION"
        assert body["geometry"]["parts"] == [5]
        assert "partTopo" not in body["geometry"]
        assert results.events[0].type == "processCompleted"

    def test_spatial_mode_and_shapely_point(self, iserver, results):
        service = QueryService(URL, transport=iserver.transport, adapter=ShapelyAdapter())
        params = QueryByGeometryParameters(
            query_params=FilterParameter(name="Countries@World"),
            geometry=Point(104, 30),
            spatial_query_mode=SpatialQueryMode.CONTAIN,
        )

        service.query_by_geometry(params, results)

        body = iserver.last_body
        assert body["spatialQueryMode"] == "CONTAIN"
        assert body["geometry"]["type"] == "POINT"

    def test_server_geometry_passes_through(self, service, iserver, results):
        geometry = ServerGeometry.from_geojson({"type": "LineString", "coordinates": [[0, 0], [10, 10]]})
        params = QueryByGeometryParameters(query_params=FilterParameter(name="Rivers@World"), geometry=geometry)

        service.query_by_geometry(params, results)

        assert iserver.last_body["geometry"]["type"] == "LINE"
        assert iserver.last_body["geometry"]["parts"] == [2]
