"""
iclient - Python client for iServer REST services.

Wraps map query, address match, topology validation, layer info and the
real-time DataFlow channel of an iServer. Caller-supplied geometries are
converted by a per-framework adapter (plain values or shapely); results
arrive through a callback as a ``ServiceEvent`` envelope::

    from iclient import QueryService, QueryBySQLParameters, FilterParameter

    def on_result(event):
        print(event.type, event.result)

    QueryService("http://localhost:8090/iserver/services/map-world/rest/maps/World").query_by_sql(
        QueryBySQLParameters(query_params=FilterParameter(name="Capitals@World")),
        on_result,
    )
"""

# The common layer is imported first: iclient.config depends on its enums.
from .common import (
    Bounds,
    DataFormat,
    FilterParameter,
    GeoCodingParameter,
    GeoDecodingParameter,
    GeometryPoint,
    OutputSetting,
    QueryByBoundsParameters,
    QueryByDistanceParameters,
    QueryByGeometryParameters,
    QueryBySQLParameters,
    ServerGeometry,
    ServerType,
    ServiceEvent,
    TopologyValidatorJobsParameter,
    TopologyValidatorRule,
)
from .config import ClientSettings, get_client_settings
from .services import (
    AddressMatchService,
    DataFlowService,
    LayerInfoService,
    ProcessingService,
    QueryService,
    ServiceBase,
)

__version__ = "1.0.0"
