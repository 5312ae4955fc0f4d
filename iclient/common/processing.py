# ============================================================================
# MODULE CONTEXT - TOPOLOGY VALIDATOR JOBS
# ============================================================================
# STATUS: Common Layer - distributed analysis (processing) service
# PURPOSE: Topology validator job parameters and request object
# EXPORTS: DatasourceConnectionInfo, OutputSetting, TopologyValidatorJobsParameter,
#          TopologyValidatorJobsService
# DEPENDENCIES: pydantic, httpx (through CommonServiceBase)
# ============================================================================
"""
Topology validator jobs.

A job is created by posting the bucketed parameters::

    {"input": {"datasetName": ...},
     "analyst": {"datasetTopology": ..., "tolerance": ..., "rule": ...},
     "output": {...}}

to ``{url}/spatialanalyst/topologyvalidator.json?returnLink=false``.
"""

import logging
from typing import Any, Dict, Mapping, Optional, Union

from iclient.util_logger import ComponentType, log_exceptions

from .enums import EngineType, OutputType, TopologyValidatorRule
from .models import ServerModel, to_server_value
from .service_base import CommonServiceBase, ServiceEvent

logger = logging.getLogger(__name__)


class DatasourceConnectionInfo(ServerModel):
    """Connection information of the datasource a job writes to."""
    alias: Optional[str] = None
    connect: Optional[bool] = None
    data_base: Optional[str] = None
    driver: Optional[str] = None
    engine_type: Optional[EngineType] = None
    exclusive: Optional[bool] = None
    open_linked: Optional[bool] = None
    password: Optional[str] = None
    read_only: Optional[bool] = None
    server: Optional[str] = None
    user: Optional[str] = None


class OutputSetting(ServerModel):
    """Output settings of a processing job."""
    type: Optional[OutputType] = OutputType.UDB
    dataset_name: Optional[str] = "analystResult"
    datasource_info: Optional[DatasourceConnectionInfo] = None
    output_path: Optional[str] = ""


class TopologyValidatorJobsParameter(ServerModel):
    """
    Topology validator job parameters.

    Attributes:
        dataset_name: Dataset to check
        dataset_topology: Dataset the check object lives in
        tolerance: Tolerance used by the check
        rule: Topology rule
        output: Output settings
    """
    dataset_name: Optional[str] = ""
    dataset_topology: Optional[str] = ""
    tolerance: Optional[str] = ""
    rule: Optional[TopologyValidatorRule] = TopologyValidatorRule.REGIONNOOVERLAP
    output: Optional[OutputSetting] = None

    @staticmethod
    @log_exceptions(ComponentType.SCHEMA, "TopologyValidatorJobsParameter")
    def to_object(
        topology_validator_jobs_parameter: Union["TopologyValidatorJobsParameter", Mapping[str, Any]],
        temp_obj: Dict[str, Any]
    ) -> Dict[str, Any]:
        """
        Bucket parameters into the job's ``input``/``output``/``analyst`` groups.

        ``datasetName`` goes to ``input``, ``output`` replaces the ``output``
        group, every other field goes to ``analyst``. For a plain mapping,
        keys are taken as server names and unknown keys land in ``analyst``.
        """
        if isinstance(topology_validator_jobs_parameter, ServerModel):
            items = {
                info.alias or name: getattr(topology_validator_jobs_parameter, name)
                for name, info in type(topology_validator_jobs_parameter).model_fields.items()
            }
        else:
            items = dict(topology_validator_jobs_parameter)

        for name, value in items.items():
            if name == "datasetName":
                temp_obj.setdefault("input", {})
                temp_obj["input"][name] = to_server_value(value)
                continue
            if name == "output":
                temp_obj["output"] = to_server_value(value)
                continue
            temp_obj.setdefault("analyst", {})
            temp_obj["analyst"][name] = to_server_value(value)
        return temp_obj


class TopologyValidatorJobsService(CommonServiceBase):
    """
    Request object for ``{url}/spatialanalyst/topologyvalidator``.

    ``url`` is the processing service root.
    """

    def __init__(self, url: str, **kwargs):
        super().__init__(f"{url}/spatialanalyst/topologyvalidator", **kwargs)

    def add_job(self, params: TopologyValidatorJobsParameter) -> ServiceEvent:
        body = TopologyValidatorJobsParameter.to_object(params, {})
        logger.debug(f"Submitting topology validator job for {body.get('input', {}).get('datasetName')}")
        return self.request("POST", f"{self.url}.json", params={"returnLink": False}, data=body)

    def get_jobs(self) -> ServiceEvent:
        return self.request("GET", f"{self.url}.json")

    def get_job(self, job_id: str) -> ServiceEvent:
        return self.request("GET", f"{self.url}/{job_id}.json")
