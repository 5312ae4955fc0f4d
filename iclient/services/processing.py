# ============================================================================
# MODULE CONTEXT - PROCESSING SERVICE
# ============================================================================
# STATUS: Service Layer - distributed analysis wrapper
# PURPOSE: Create and list topology validator jobs
# EXPORTS: ProcessingService, processing_service
# DEPENDENCIES: iclient.common.processing
# ============================================================================
"""
Processing (distributed analysis) service.

Only the topology validator jobs resource is wrapped. Job status is not
polled; call ``get_topology_validator_job`` to read it.
"""

from typing import Callable

from iclient.common.processing import TopologyValidatorJobsParameter, TopologyValidatorJobsService
from iclient.common.service_base import ServiceEvent

from .service_base import ServiceBase

RequestCallback = Callable[[ServiceEvent], None]


class ProcessingService(ServiceBase):

    def add_topology_validator_job(
        self,
        params: TopologyValidatorJobsParameter,
        callback: RequestCallback
    ) -> "ProcessingService":
        self._jobs_service(callback).add_job(params)
        return self

    def get_topology_validator_jobs(self, callback: RequestCallback) -> "ProcessingService":
        self._jobs_service(callback).get_jobs()
        return self

    def get_topology_validator_job(self, job_id: str, callback: RequestCallback) -> "ProcessingService":
        self._jobs_service(callback).get_job(job_id)
        return self

    def _jobs_service(self, callback) -> TopologyValidatorJobsService:
        return TopologyValidatorJobsService(
            self.url,
            event_listeners=self._event_listeners(callback),
            **self._request_options()
        )


def processing_service(url: str, options=None, **kwargs) -> ProcessingService:
    return ProcessingService(url, options, **kwargs)
