# ============================================================================
# MODULE CONTEXT - QUERY SERVICE
# ============================================================================
# STATUS: Service Layer - map query wrapper
# PURPOSE: Normalize caller parameters and dispatch one query per mode
# EXPORTS: QueryService, query_service
# DEPENDENCIES: iclient.common.query
# ============================================================================
"""
Map query service.

Usage:
    def on_result(event):
        if event.type == "processCompleted":
            print(event.result["recordsets"][0]["features"])

    params = QueryBySQLParameters(query_params=FilterParameter(
        name="Countries@World", attribute_filter="SMID < 10"))
    query_service(map_url).query_by_sql(params, on_result)

Both ``processCompleted`` and ``processFailed`` are delivered to the same
callback; check ``event.type``.
"""

from typing import Callable, Optional, Type

from iclient.common.enums import DataFormat
from iclient.common.query import (
    QueryByBoundsParameters,
    QueryByBoundsService,
    QueryByDistanceParameters,
    QueryByDistanceService,
    QueryByGeometryParameters,
    QueryByGeometryService,
    QueryBySQLParameters,
    QueryBySQLService,
    QueryParameters,
    QueryServiceBase,
)
from iclient.common.service_base import ServiceEvent

from .service_base import ServiceBase

RequestCallback = Callable[[ServiceEvent], None]


class QueryService(ServiceBase):
    """
    Map query service.

    Args:
        url: Map service URL, e.g. ``http://host:8090/iserver/services/map-world/rest/maps/World``
        options: See ServiceBase
    """

    def query_by_bounds(
        self,
        params: Optional[QueryByBoundsParameters],
        callback: RequestCallback,
        result_format: Optional[DataFormat] = None
    ) -> "QueryService":
        """Query features inside a rectangle."""
        return self._query(QueryByBoundsService, QueryByBoundsParameters, params, callback, result_format)

    def query_by_distance(
        self,
        params: Optional[QueryByDistanceParameters],
        callback: RequestCallback,
        result_format: Optional[DataFormat] = None
    ) -> "QueryService":
        """Query features within a distance of a geometry."""
        return self._query(QueryByDistanceService, QueryByDistanceParameters, params, callback, result_format)

    def query_by_sql(
        self,
        params: Optional[QueryBySQLParameters],
        callback: RequestCallback,
        result_format: Optional[DataFormat] = None
    ) -> "QueryService":
        """Query features by attribute filter."""
        return self._query(QueryBySQLService, QueryBySQLParameters, params, callback, result_format)

    def query_by_geometry(
        self,
        params: Optional[QueryByGeometryParameters],
        callback: RequestCallback,
        result_format: Optional[DataFormat] = None
    ) -> "QueryService":
        """Query features by spatial relation to a geometry."""
        return self._query(QueryByGeometryService, QueryByGeometryParameters, params, callback, result_format)

    def _query(
        self,
        service_class: Type[QueryServiceBase],
        params_class: Type[QueryParameters],
        params: Optional[QueryParameters],
        callback: RequestCallback,
        result_format: Optional[DataFormat]
    ) -> "QueryService":
        service = service_class(
            self.url,
            event_listeners=self._event_listeners(callback),
            format=self._process_format(result_format),
            **self._request_options()
        )
        service.process_async(self._process_params(params, params_class))
        return self

    def _process_params(
        self,
        params: Optional[QueryParameters],
        params_class: Type[QueryParameters] = QueryParameters
    ) -> QueryParameters:
        if params is None:
            params = params_class()
        if params.return_content is None:
            params.return_content = True
        if params.query_params is not None and not isinstance(params.query_params, list):
            params.query_params = [params.query_params]

        if getattr(params, "bounds", None) is not None:
            params.bounds = self.adapter.to_bounds(params.bounds)

        if getattr(params, "geometry", None) is not None:
            params.geometry = self.adapter.to_geometry(params.geometry)

        return params

    def _process_format(self, result_format: Optional[DataFormat]) -> DataFormat:
        return result_format if result_format else DataFormat.GEOJSON


def query_service(url: str, options=None, **kwargs) -> QueryService:
    return QueryService(url, options, **kwargs)
