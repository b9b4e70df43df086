"""CloudConvert job API adapter for docflux."""

from __future__ import annotations

import base64
import logging
from typing import Any

import httpx

from docflux.config.models import CloudConvertSettings
from docflux.errors import (
    InvalidPayload,
    RemoteServiceError,
    ServiceUnavailable,
)
from docflux.remote.base import ConversionVendor
from docflux.remote.models import ExportedFile, JobState, JobStatus, PageRange, UploadFile

logger = logging.getLogger(__name__)

_VENDOR = "cloudconvert"
_UNAVAILABLE = "Conversion service temporarily unavailable"


class CloudConvertClient(ConversionVendor):
    """CloudConvert adapter over its REST job API via httpx.

    A job is a small task graph (import -> operation -> export/url). Status
    is read from ``GET /jobs/{id}``; results are the export task's files.
    """

    name = _VENDOR

    def __init__(
        self,
        api_key: str,
        settings: CloudConvertSettings | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        if not api_key:
            raise ValueError("CloudConvert API key required")
        self.settings = settings or CloudConvertSettings()
        self._base_url = self.settings.base_url.rstrip("/")
        self._auth = {"Authorization": f"Bearer {api_key}"}
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=float(self.settings.timeout))

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    # ------------------------------------------------------------------
    # HTTP helpers
    # ------------------------------------------------------------------

    async def _request(
        self,
        method: str,
        url: str,
        operation: str,
        *,
        auth: bool = True,
        **kwargs: Any,
    ) -> httpx.Response:
        headers = dict(self._auth) if auth else {}
        try:
            resp = await self._client.request(method, url, headers=headers, **kwargs)
        except httpx.TransportError as e:
            raise ServiceUnavailable(_VENDOR, operation, _UNAVAILABLE) from e
        _raise_for_vendor(resp, operation)
        return resp

    async def _create_job(self, tasks: dict[str, dict[str, Any]], operation: str) -> dict:
        resp = await self._request(
            "POST", f"{self._base_url}/jobs", operation, json={"tasks": tasks}
        )
        data = _job_data(resp, operation)
        logger.info("CloudConvert job created: %s (%s)", data["id"], operation)
        return data

    async def _get_job(self, job_id: str, operation: str) -> dict:
        resp = await self._request("GET", f"{self._base_url}/jobs/{job_id}", operation)
        return _job_data(resp, operation)

    async def _upload(self, job: dict, task_name: str, upload: UploadFile, operation: str) -> None:
        task = _find_task(job, task_name) or {}
        form = (task.get("result") or {}).get("form")
        if not form or "url" not in form:
            raise RemoteServiceError(_VENDOR, operation, f"Upload task {task_name} not found")

        logger.debug("Uploading %s to task %s", upload.filename, task_name)
        try:
            await self._request(
                "POST",
                form["url"],
                operation,
                auth=False,
                data=form.get("parameters", {}),
                files={"file": (upload.filename, upload.content, "application/pdf")},
            )
        except RemoteServiceError as e:
            raise RemoteServiceError(
                _VENDOR,
                operation,
                f"Upload failed for {upload.filename}: {e.detail}",
                retryable=e.retryable,
                status_code=e.status_code,
            ) from e

    # ------------------------------------------------------------------
    # ConversionVendor
    # ------------------------------------------------------------------

    async def submit_job(self, payload: bytes, file_name: str, target_format: str) -> str:
        tasks = {
            "import-file": {
                "operation": "import/base64",
                "file": base64.b64encode(payload).decode("ascii"),
                "filename": file_name,
            },
            "convert-file": {
                "operation": "convert",
                "input": "import-file",
                "output_format": target_format,
            },
            "export-file": {
                "operation": "export/url",
                "input": "convert-file",
            },
        }
        job = await self._create_job(tasks, "submit_job")
        return job["id"]

    async def submit_merge(self, files: list[UploadFile]) -> str:
        upload_names = [f"upload-file-{i}" for i in range(len(files))]
        tasks: dict[str, dict[str, Any]] = {
            name: {"operation": "import/upload"} for name in upload_names
        }
        tasks["merge-pdf"] = {
            "operation": "merge",
            "input": upload_names,
            "output_format": "pdf",
        }
        tasks["export-file"] = {"operation": "export/url", "input": "merge-pdf"}

        job = await self._create_job(tasks, "submit_merge")
        for name, upload in zip(upload_names, files):
            await self._upload(job, name, upload, "submit_merge")
        return job["id"]

    async def submit_split(
        self,
        payload: bytes,
        file_name: str,
        pages: str | None = None,
        page_ranges: list[PageRange] | None = None,
    ) -> str:
        split: dict[str, Any] = {
            "operation": "split",
            "input": "upload-file",
            "output_format": "pdf",
        }
        if pages:
            split["pages"] = pages
        elif page_ranges:
            split["page_ranges"] = [str(r) for r in page_ranges]
        else:
            raise InvalidPayload(_VENDOR, "submit_split", "pages or page_ranges required")

        tasks = {
            "upload-file": {"operation": "import/upload"},
            "split-pdf": split,
            "export-files": {"operation": "export/url", "input": "split-pdf"},
        }
        job = await self._create_job(tasks, "submit_split")
        await self._upload(
            job, "upload-file", UploadFile(content=payload, filename=file_name), "submit_split"
        )
        return job["id"]

    async def poll_status(self, job_id: str) -> JobState:
        job = await self._get_job(job_id, "poll_status")
        raw_status = job.get("status", "")
        try:
            status = JobStatus(raw_status)
        except ValueError:
            logger.debug("Unknown CloudConvert status %r, treating as processing", raw_status)
            status = JobStatus.processing

        for task in job.get("tasks") or []:
            if task.get("status") == "error":
                return JobState(
                    job_id=job_id,
                    status=JobStatus.error,
                    detail=task.get("message") or "Unknown error",
                )
        return JobState(job_id=job_id, status=status)

    async def fetch_result(self, job_id: str) -> list[ExportedFile]:
        job = await self._get_job(job_id, "fetch_result")
        files: list[ExportedFile] = []
        for task in job.get("tasks") or []:
            if task.get("operation") != "export/url":
                continue
            for item in (task.get("result") or {}).get("files") or []:
                if item.get("url"):
                    files.append(
                        ExportedFile(url=item["url"], filename=item.get("filename", ""))
                    )
        if not files:
            raise RemoteServiceError(
                _VENDOR, "fetch_result", "Converted file could not be retrieved"
            )
        return files


def _vendor_message(resp: httpx.Response) -> str | None:
    try:
        body = resp.json()
    except ValueError:
        return None
    if isinstance(body, dict):
        message = body.get("message")
        if isinstance(message, str) and message:
            return message
    return None


def _raise_for_vendor(resp: httpx.Response, operation: str) -> None:
    if resp.is_success:
        return
    detail = _vendor_message(resp) or _UNAVAILABLE
    logger.warning("CloudConvert %s returned HTTP %d", operation, resp.status_code)
    if resp.status_code >= 500 or resp.status_code == 429:
        raise ServiceUnavailable(_VENDOR, operation, detail, status_code=resp.status_code)
    raise InvalidPayload(_VENDOR, operation, detail, status_code=resp.status_code)


def _job_data(resp: httpx.Response, operation: str) -> dict:
    try:
        data = resp.json()["data"]
    except (ValueError, KeyError, TypeError) as e:
        raise RemoteServiceError(_VENDOR, operation, "Malformed job response") from e
    if not isinstance(data, dict) or not data.get("id"):
        raise RemoteServiceError(_VENDOR, operation, "Malformed job response")
    return data


def _find_task(job: dict, name: str) -> dict | None:
    return next((t for t in job.get("tasks") or [] if t.get("name") == name), None)
