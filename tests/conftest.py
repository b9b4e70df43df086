"""Shared test fixtures for docflux."""

import base64

import pytest

from docflux.config.models import DocfluxConfig
from docflux.remote.base import ConversionVendor
from docflux.remote.models import ExportedFile, JobState, JobStatus
from docflux.translate.base import Translator


def b64(text: str) -> str:
    return base64.b64encode(text.encode("utf-8")).decode("ascii")


class FakeVendor(ConversionVendor):
    """Scripted vendor: returns *statuses* from successive polls."""

    name = "fake"

    def __init__(self, statuses=None, files=None):
        self.statuses = list(statuses or [JobStatus.finished])
        self.files = files or [ExportedFile(url="https://files.example/out", filename="out.bin")]
        self.submitted = []
        self.polls = 0
        self.closed = False

    async def submit_job(self, payload, file_name, target_format):
        self.submitted.append(("convert", file_name, target_format))
        return "job-1"

    async def submit_merge(self, files):
        self.submitted.append(("merge", [f.filename for f in files]))
        return "job-merge"

    async def submit_split(self, payload, file_name, pages=None, page_ranges=None):
        self.submitted.append(("split", file_name, pages, page_ranges))
        return "job-split"

    async def poll_status(self, job_id):
        self.polls += 1
        status = self.statuses.pop(0) if len(self.statuses) > 1 else self.statuses[0]
        if isinstance(status, Exception):
            raise status
        if isinstance(status, JobState):
            return status
        return JobState(job_id=job_id, status=status)

    async def fetch_result(self, job_id):
        return list(self.files)

    async def aclose(self):
        self.closed = True


class FakeTranslator(Translator):
    name = "fake"

    def __init__(self, result="Hola mundo"):
        self.result = result
        self.calls = []

    async def translate(self, text, target_language):
        self.calls.append((text, target_language))
        if isinstance(self.result, Exception):
            raise self.result
        return self.result


@pytest.fixture
def sample_config():
    return DocfluxConfig()


@pytest.fixture
def sleeps():
    """Records requested delays instead of sleeping."""
    return []


@pytest.fixture
def no_sleep(sleeps):
    async def _sleep(seconds):
        sleeps.append(seconds)

    return _sleep


@pytest.fixture
def fake_vendor():
    return FakeVendor()


@pytest.fixture
def fake_translator():
    return FakeTranslator()


@pytest.fixture
def long_text():
    return (
        "The quarterly report shows that revenue grew by 12 percent, driven mainly by new customers in Europe. "
        "Costs stayed flat during the period. "
        "However, the main risk remains the dependency on a single supplier for key components. "
        "The team met twice to review the hiring plan and office moves. "
        "Several minor incidents were logged and closed within the week. "
        "In conclusion, the company is well positioned, and the board approved the budget for 2025."
    )
