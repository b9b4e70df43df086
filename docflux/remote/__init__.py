"""Remote (vendor) conversion jobs."""

import os

from docflux.config.models import CloudConvertSettings
from docflux.remote.base import ConversionVendor
from docflux.remote.cloudconvert import CloudConvertClient
from docflux.remote.models import (
    ExportedFile,
    JobState,
    JobStatus,
    OrchestrationState,
    PageRange,
    RemoteResult,
    UploadFile,
)
from docflux.remote.orchestrator import JobRun, RemoteJobOrchestrator


def create_vendor(settings: CloudConvertSettings) -> ConversionVendor:
    """Create the conversion vendor client from app-level settings.

    The API key is read from the environment variable named by
    ``settings.api_key_env``; it is never part of the config file itself.
    """
    api_key = os.environ.get(settings.api_key_env)
    if not api_key:
        raise ValueError(
            f"Missing API key: set environment variable {settings.api_key_env!r}"
        )
    return CloudConvertClient(api_key, settings)


__all__ = [
    "CloudConvertClient",
    "ConversionVendor",
    "ExportedFile",
    "JobRun",
    "JobState",
    "JobStatus",
    "OrchestrationState",
    "PageRange",
    "RemoteJobOrchestrator",
    "RemoteResult",
    "UploadFile",
    "create_vendor",
]
