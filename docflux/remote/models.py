"""Pydantic models for remote conversion jobs."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field, model_validator


class JobStatus(str, Enum):
    """Vendor-side job states, as observed by polling."""

    waiting = "waiting"
    processing = "processing"
    finished = "finished"
    error = "error"

    @property
    def terminal(self) -> bool:
        return self in (JobStatus.finished, JobStatus.error)


class OrchestrationState(str, Enum):
    """Local lifecycle of one orchestrated job."""

    submitted = "submitted"
    polling = "polling"
    finished = "finished"
    error = "error"
    timed_out = "timed_out"


class JobState(BaseModel):
    """One observation of a vendor job."""

    job_id: str = Field(min_length=1)
    status: JobStatus
    detail: str | None = None


class ExportedFile(BaseModel):
    """A downloadable result produced by a finished job."""

    url: str
    filename: str


class UploadFile(BaseModel):
    """Raw bytes plus a name, for vendor upload tasks."""

    content: bytes
    filename: str = Field(min_length=1)


class PageRange(BaseModel):
    start: int = Field(ge=1)
    end: int = Field(ge=1)

    @model_validator(mode="after")
    def check_order(self) -> "PageRange":
        if self.end < self.start:
            raise ValueError(f"Invalid page range {self.start}-{self.end}")
        return self

    def __str__(self) -> str:
        return f"{self.start}-{self.end}"


class RemoteResult(BaseModel):
    """Outcome of an orchestrated remote operation."""

    job_id: str
    download_url: str | None = None
    filename: str | None = None
    files: list[ExportedFile] = Field(default_factory=list)
    attempts: int = 0
