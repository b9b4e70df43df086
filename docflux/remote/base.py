"""Abstract remote conversion vendor interface."""

from __future__ import annotations

from abc import ABC, abstractmethod

from docflux.remote.models import ExportedFile, JobState, PageRange, UploadFile


class ConversionVendor(ABC):
    """Submit / poll / fetch contract of an external job-based conversion API.

    Implementations translate every vendor failure into the docflux error
    kinds; callers never see vendor-specific payloads.
    """

    name: str = "vendor"

    @abstractmethod
    async def submit_job(self, payload: bytes, file_name: str, target_format: str) -> str:
        """Create a conversion job and return its id."""
        ...

    @abstractmethod
    async def submit_merge(self, files: list[UploadFile]) -> str:
        """Create a PDF merge job, upload every file, and return the job id."""
        ...

    @abstractmethod
    async def submit_split(
        self,
        payload: bytes,
        file_name: str,
        pages: str | None = None,
        page_ranges: list[PageRange] | None = None,
    ) -> str:
        """Create a PDF split job, upload the file, and return the job id."""
        ...

    @abstractmethod
    async def poll_status(self, job_id: str) -> JobState:
        """Observe the current state of a job."""
        ...

    @abstractmethod
    async def fetch_result(self, job_id: str) -> list[ExportedFile]:
        """Return the exported files of a finished job."""
        ...

    async def aclose(self) -> None:
        """Release network resources. Default: nothing to release."""
        return None
