"""Sequencing of submit -> poll -> fetch against a ConversionVendor."""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable

from docflux.converter.dispatcher import base_name, result_filename
from docflux.errors import ConversionTimeout, RemoteServiceError
from docflux.remote.base import ConversionVendor
from docflux.remote.models import (
    JobStatus,
    OrchestrationState,
    PageRange,
    RemoteResult,
    UploadFile,
)

logger = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[None]]

_FAILURE_MESSAGES = {
    "convert": "Error during file conversion",
    "merge": "Error while merging the PDFs",
    "split": "Error while splitting the PDF",
}


class JobRun:
    """State of one orchestrated job: submitted -> polling -> terminal."""

    _TRANSITIONS = {
        OrchestrationState.submitted: {OrchestrationState.polling},
        OrchestrationState.polling: {
            OrchestrationState.finished,
            OrchestrationState.error,
            OrchestrationState.timed_out,
        },
    }

    def __init__(self, job_id: str) -> None:
        self.job_id = job_id
        self.state = OrchestrationState.submitted
        self.history: list[OrchestrationState] = [self.state]
        self.attempts = 0

    def transition(self, new_state: OrchestrationState) -> None:
        allowed = self._TRANSITIONS.get(self.state, set())
        if new_state not in allowed:
            raise RuntimeError(
                f"Illegal job transition {self.state.value} -> {new_state.value}"
            )
        self.state = new_state
        self.history.append(new_state)


class RemoteJobOrchestrator:
    """Drives vendor jobs to completion with fixed-delay, bounded polling.

    The orchestrator holds no per-job state, so one instance can serve
    concurrent requests. There is no cancellation: a caller that gives up
    simply stops awaiting and the vendor job keeps running.
    """

    def __init__(
        self,
        vendor: ConversionVendor,
        *,
        poll_interval: float = 2.0,
        max_attempts: int = 30,
        sleep: Sleep = asyncio.sleep,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.vendor = vendor
        self.poll_interval = poll_interval
        self.max_attempts = max_attempts
        self._sleep = sleep
        self._clock = clock

    async def wait_for(self, job_id: str, operation: str = "convert") -> JobRun:
        """Poll *job_id* until it finishes, fails, or the attempt bound is hit."""
        run = JobRun(job_id)
        run.transition(OrchestrationState.polling)

        while run.attempts < self.max_attempts:
            await self._sleep(self.poll_interval)
            run.attempts += 1
            try:
                observed = await self.vendor.poll_status(job_id)
            except RemoteServiceError as e:
                if not e.retryable:
                    run.transition(OrchestrationState.error)
                    raise
                logger.warning(
                    "Status check for job %s failed (attempt %d): %s",
                    job_id, run.attempts, e.detail,
                )
                continue

            logger.info(
                "Job %s status: %s (attempt %d)", job_id, observed.status.value, run.attempts
            )
            if observed.status is JobStatus.finished:
                run.transition(OrchestrationState.finished)
                return run
            if observed.status is JobStatus.error:
                run.transition(OrchestrationState.error)
                raise RemoteServiceError(
                    self.vendor.name,
                    operation,
                    observed.detail or _FAILURE_MESSAGES.get(operation, "Job failed"),
                )

        run.transition(OrchestrationState.timed_out)
        logger.error("Job %s timed out after %d attempts", job_id, run.attempts)
        raise ConversionTimeout(job_id, run.attempts)

    async def convert(self, payload: bytes, file_name: str, target_format: str) -> RemoteResult:
        job_id = await self.vendor.submit_job(payload, file_name, target_format)
        run = await self.wait_for(job_id, "convert")
        files = await self.vendor.fetch_result(job_id)
        return RemoteResult(
            job_id=job_id,
            download_url=files[0].url,
            filename=result_filename(file_name, target_format),
            files=files,
            attempts=run.attempts,
        )

    async def merge(self, files: list[UploadFile]) -> RemoteResult:
        job_id = await self.vendor.submit_merge(files)
        run = await self.wait_for(job_id, "merge")
        exported = await self.vendor.fetch_result(job_id)
        return RemoteResult(
            job_id=job_id,
            download_url=exported[0].url,
            filename=f"merged_{int(self._clock() * 1000)}.pdf",
            files=exported,
            attempts=run.attempts,
        )

    async def split(
        self,
        payload: bytes,
        file_name: str,
        pages: str | None = None,
        page_ranges: list[PageRange] | None = None,
    ) -> RemoteResult:
        job_id = await self.vendor.submit_split(payload, file_name, pages, page_ranges)
        run = await self.wait_for(job_id, "split")
        exported = await self.vendor.fetch_result(job_id)
        stem = base_name(file_name)
        parts = [
            f.model_copy(update={"filename": f"{stem}_part_{i}.pdf"})
            for i, f in enumerate(exported, start=1)
        ]
        return RemoteResult(job_id=job_id, files=parts, attempts=run.attempts)
