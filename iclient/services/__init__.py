"""
Caller-facing service wrappers.

Integration:
    from iclient.services import QueryService, AddressMatchService

    QueryService(map_url).query_by_sql(params, callback)
"""

from .service_base import ServiceBase
from .query import QueryService, query_service
from .address_match import AddressMatchService, address_match_service
from .dataflow import DataFlowEvent, DataFlowService, data_flow_service
from .processing import ProcessingService, processing_service
from .layer_info import LayerInfoService, layer_info_service

__all__ = [
    "ServiceBase",
    "QueryService",
    "AddressMatchService",
    "DataFlowService",
    "DataFlowEvent",
    "ProcessingService",
    "LayerInfoService",
    "query_service",
    "address_match_service",
    "data_flow_service",
    "processing_service",
    "layer_info_service",
]
