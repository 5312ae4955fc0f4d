# ============================================================================
# MODULE CONTEXT - MAP QUERY REQUESTS
# ============================================================================
# STATUS: Common Layer - queryResults resource of an iServer map
# PURPOSE: Query parameter DTOs and one request object per query mode
# EXPORTS: FilterParameter, QueryParameters, QueryByBoundsParameters,
#          QueryByDistanceParameters, QueryBySQLParameters, QueryByGeometryParameters,
#          QueryServiceBase, QueryByBoundsService, QueryByDistanceService,
#          QueryBySQLService, QueryByGeometryService
# DEPENDENCIES: pydantic, httpx (through CommonServiceBase)
# ============================================================================
"""
Map query requests.

Every query mode posts to ``{map_url}/queryResults.json`` with a JSON body
whose ``queryMode`` selects the server-side query::

    BoundsQuery   -> bounds
    DistanceQuery -> geometry + distance (FindNearest when is_nearest)
    SqlQuery      -> attribute filters only
    SpatialQuery  -> geometry + spatialQueryMode

With ``DataFormat.GEOJSON`` each recordset's features are returned as a
GeoJSON FeatureCollection.
"""

import copy
from typing import Any, Dict, List, Optional, Union

from pydantic import Field

from .enums import DataFormat, GeometryType, QueryOption, SpatialQueryMode
from .geometry import features_to_feature_collection, to_server_geometry
from .models import ServerModel, to_server_value
from .service_base import CommonServiceBase, ServiceEvent


# ============================================================================
# PARAMETERS
# ============================================================================

class FilterParameter(ServerModel):
    """Attribute filter applied to one layer."""
    name: Optional[str] = None
    attribute_filter: Optional[str] = None
    join_items: Optional[List[Dict[str, Any]]] = None
    link_items: Optional[List[Dict[str, Any]]] = None
    ids: Optional[List[int]] = None
    order_by: Optional[str] = None
    group_by: Optional[str] = None
    fields: Optional[List[str]] = None


class QueryParameters(ServerModel):
    """
    Parameters shared by every query mode.

    ``return_content`` is left ``None`` here; the caller-facing wrapper
    fills it, and the request treats ``None`` as ``True``.
    """
    custom_params: Optional[str] = None
    expect_count: Optional[int] = 100000
    network_type: Optional[GeometryType] = GeometryType.LINE
    query_option: Optional[QueryOption] = QueryOption.ATTRIBUTEANDGEOMETRY
    query_params: Optional[Union[FilterParameter, List[FilterParameter]]] = None
    prj_coord_sys: Optional[Dict[str, Any]] = None
    start_record: Optional[int] = 0
    hold_time: Optional[int] = 10
    return_custom_result: Optional[bool] = False
    return_content: Optional[bool] = None


class QueryByBoundsParameters(QueryParameters):
    bounds: Optional[Any] = None


class QueryByDistanceParameters(QueryParameters):
    distance: Optional[float] = 0
    geometry: Optional[Any] = None
    is_nearest: Optional[bool] = None


class QueryBySQLParameters(QueryParameters):
    pass


class QueryByGeometryParameters(QueryParameters):
    geometry: Optional[Any] = None
    spatial_query_mode: Optional[SpatialQueryMode] = Field(default=SpatialQueryMode.INTERSECT)


# ============================================================================
# REQUESTS
# ============================================================================

class QueryServiceBase(CommonServiceBase):
    """
    Base of the four query request objects.

    Subclasses implement ``get_json_parameters``.
    """

    def __init__(self, url: str, **kwargs):
        super().__init__(url, **kwargs)
        self.return_content = True

    def get_json_parameters(self, params: QueryParameters) -> Dict[str, Any]:
        raise NotImplementedError

    def _query_parameters(self, params: QueryParameters) -> Dict[str, Any]:
        query_params = params.query_params
        if query_params is not None and not isinstance(query_params, list):
            query_params = [query_params]
        result = {
            "queryParams": to_server_value(query_params or []),
            "startRecord": params.start_record,
            "expectCount": params.expect_count,
            "networkType": to_server_value(params.network_type),
            "queryOption": to_server_value(params.query_option),
            "holdTime": params.hold_time,
        }
        if params.prj_coord_sys:
            result["prjCoordSys"] = params.prj_coord_sys
        if params.custom_params:
            result["customParams"] = params.custom_params
        return result

    def process_async(self, params: QueryParameters) -> ServiceEvent:
        """
        Post the query and fire processCompleted or processFailed.

        Returns:
            The envelope that was delivered to the listeners
        """
        self.return_content = params.return_content is not False
        query = {"returnContent": self.return_content}
        if params.return_custom_result:
            query["returnCustomResult"] = True
        return self.request(
            "POST",
            f"{self.url}/queryResults.json",
            params=query,
            data=self.get_json_parameters(params)
        )

    def transform_result(self, result: Any) -> Any:
        if self.format != DataFormat.GEOJSON or not isinstance(result, dict):
            return result
        recordsets = result.get("recordsets")
        if not recordsets:
            return result
        result = copy.copy(result)
        result["recordsets"] = [
            {**recordset, "features": features_to_feature_collection(recordset.get("features") or [])}
            for recordset in recordsets
        ]
        return result


class QueryByBoundsService(QueryServiceBase):
    def get_json_parameters(self, params: QueryByBoundsParameters) -> Dict[str, Any]:
        body = {
            "queryMode": "BoundsQuery",
            "queryParameters": self._query_parameters(params),
        }
        if params.bounds is not None:
            body["bounds"] = to_server_value(params.bounds)
        return body


class QueryByDistanceService(QueryServiceBase):
    def get_json_parameters(self, params: QueryByDistanceParameters) -> Dict[str, Any]:
        return {
            "queryMode": "FindNearest" if params.is_nearest else "DistanceQuery",
            "queryParameters": self._query_parameters(params),
            "geometry": to_server_geometry(params.geometry),
            "distance": params.distance,
        }


class QueryBySQLService(QueryServiceBase):
    def get_json_parameters(self, params: QueryBySQLParameters) -> Dict[str, Any]:
        return {
            "queryMode": "SqlQuery",
            "queryParameters": self._query_parameters(params),
        }


class QueryByGeometryService(QueryServiceBase):
    def get_json_parameters(self, params: QueryByGeometryParameters) -> Dict[str, Any]:
        return {
            "queryMode": "SpatialQuery",
            "queryParameters": self._query_parameters(params),
            "geometry": to_server_geometry(params.geometry),
            "spatialQueryMode": to_server_value(params.spatial_query_mode),
        }
