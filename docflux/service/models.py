"""Request/response models of the document service.

Field names are snake_case in Python and camelCase on the JSON boundary
(``fileContent``, ``targetFormat``, ``downloadUrl`` ...).
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from docflux.remote.models import ExportedFile, PageRange


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_payload(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------


class ConversionRequest(CamelModel):
    file_content: str = ""
    file_name: str = ""
    source_format: str = ""
    target_format: str = ""
    file_size: int = Field(default=0, ge=0)


class SummaryRequest(CamelModel):
    file_content: str = ""
    file_name: str = ""
    file_type: str = ""


class TranslationRequest(CamelModel):
    file_content: str = ""
    file_name: str = ""
    file_type: str = ""
    target_language: str = ""


class MergeFile(CamelModel):
    content: str
    filename: str


class MergeRequest(CamelModel):
    files: list[MergeFile] = Field(default_factory=list)


class SplitRequest(CamelModel):
    file_content: str = ""
    file_name: str = ""
    split_type: Literal["pages", "range"] | None = None
    pages: str | None = None
    page_ranges: list[PageRange] | None = None


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------


class ServiceResponse(CamelModel):
    success: bool
    error: str | None = None
    error_kind: str | None = None


class ConversionResponse(ServiceResponse):
    download_url: str | None = None
    filename: str | None = None


class SummaryResponse(ServiceResponse):
    summary: str | None = None


class TranslationResponse(ServiceResponse):
    translated_text: str | None = None


class MergeResponse(ServiceResponse):
    download_url: str | None = None
    filename: str | None = None


class SplitResponse(ServiceResponse):
    files: list[ExportedFile] | None = None
