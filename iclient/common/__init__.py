"""
Framework-agnostic service layer.

Request objects, DTOs, the geometry model and the DataFlow channel that
the caller-facing wrappers in ``iclient.services`` delegate to.
"""

from .enums import (
    ColorSpaceType,
    DataFormat,
    EngineType,
    EventType,
    GeometryType,
    OutputType,
    QueryOption,
    ServerType,
    SpatialQueryMode,
    TopologyValidatorRule,
    UGCLayerType,
)
from .geometry import Bounds, GeometryPoint, ServerGeometry
from .service_base import CommonServiceBase, ServiceEvent
from .query import (
    FilterParameter,
    QueryParameters,
    QueryByBoundsParameters,
    QueryByDistanceParameters,
    QueryBySQLParameters,
    QueryByGeometryParameters,
    QueryByBoundsService,
    QueryByDistanceService,
    QueryBySQLService,
    QueryByGeometryService,
)
from .address_match import AddressMatchRequest, GeoCodingParameter, GeoDecodingParameter
from .processing import (
    DatasourceConnectionInfo,
    OutputSetting,
    TopologyValidatorJobsParameter,
    TopologyValidatorJobsService,
)
from .layers import LayerInfoRequest, ServerColor, UGCImage, UGCMapLayer, UGCSubLayer
from .dataflow import ChannelEvent, DataFlowChannel, DATAFLOW_EVENT_TYPES
