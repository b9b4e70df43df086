"""Document service: validation and routing for every user-facing operation."""

from __future__ import annotations

import asyncio
import logging
import re
from functools import cached_property
from typing import Any, TypeVar

from pydantic import ValidationError

from docflux.config.models import DocfluxConfig
from docflux.converter.dispatcher import (
    SUPPORTED_FORMATS,
    canonical_extension,
    dispatch,
    is_local_pair,
)
from docflux.errors import (
    DocfluxError,
    MalformedInput,
    ServiceUnavailable,
    UnsupportedConversion,
)
from docflux.remote.base import ConversionVendor
from docflux.remote.models import UploadFile
from docflux.remote.orchestrator import RemoteJobOrchestrator, Sleep
from docflux.service.models import (
    ConversionRequest,
    ConversionResponse,
    MergeRequest,
    MergeResponse,
    ServiceResponse,
    SplitRequest,
    SplitResponse,
    SummaryRequest,
    SummaryResponse,
    TranslationRequest,
    TranslationResponse,
)
from docflux.summarizer.extractive import ExtractiveSummarizer
from docflux.translate.base import Translator, truncate_for_vendor
from docflux.translate.mymemory import MyMemoryTranslator
from docflux.transport import (
    content_type_for,
    decode_transport,
    decode_transport_bytes,
    ensure_readable_text,
)

logger = logging.getLogger(__name__)

R = TypeVar("R", bound=ServiceResponse)

_LANGUAGE_RE = re.compile(r"^[a-z]{2,3}(-[A-Za-z]{2,4})?$")


def _failure(response_cls: type[R], error: DocfluxError) -> R:
    return response_cls(success=False, error=error.message, error_kind=error.kind)


class DocumentService:
    """Entry points mirroring the conversion, summary, translation, merge
    and split endpoints. Handlers return response models; expected failures
    never escape as exceptions.
    """

    def __init__(
        self,
        config: DocfluxConfig | None = None,
        vendor: ConversionVendor | None = None,
        translator: Translator | None = None,
        *,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self.config = config or DocfluxConfig()
        self.vendor = vendor
        self._translator = translator
        self._sleep = sleep
        self.summarizer = ExtractiveSummarizer(self.config.summarizer)

    @cached_property
    def translator(self) -> Translator:
        return self._translator or MyMemoryTranslator(self.config.translation)

    def _orchestrator(self, poll_interval: float) -> RemoteJobOrchestrator:
        if self.vendor is None:
            raise ServiceUnavailable(
                "docflux", "remote", "Conversion vendor not configured"
            )
        return RemoteJobOrchestrator(
            self.vendor,
            poll_interval=poll_interval,
            max_attempts=self.config.cloudconvert.max_attempts,
            sleep=self._sleep,
        )

    async def aclose(self) -> None:
        if self.vendor is not None:
            await self.vendor.aclose()
        if "translator" in self.__dict__:
            await self.translator.aclose()

    # ------------------------------------------------------------------
    # Conversion
    # ------------------------------------------------------------------

    async def convert_file(self, request: ConversionRequest) -> ConversionResponse:
        logger.info(
            "Conversion request: %s (%s -> %s, %d bytes)",
            request.file_name, request.source_format, request.target_format, request.file_size,
        )
        if not request.file_content or not request.file_name or not request.target_format:
            return _failure(
                ConversionResponse,
                MalformedInput(
                    "Missing parameters: fileContent, fileName and targetFormat are required"
                ),
            )

        limit_mb = self.config.limits.max_file_size_mb
        if request.file_size > limit_mb * 1024 * 1024:
            return _failure(
                ConversionResponse, MalformedInput(f"File too large. Limit: {limit_mb}MB")
            )

        source = canonical_extension(request.source_format, request.file_name)
        target = canonical_extension(request.target_format)
        try:
            if is_local_pair(source, target):
                result = dispatch(
                    request.file_content, request.file_name, source, target
                )
                return ConversionResponse(
                    success=True,
                    download_url=f"data:{content_type_for(target)};base64,{result.content}",
                    filename=result.filename,
                )

            if self.vendor is None:
                raise UnsupportedConversion(source, target, SUPPORTED_FORMATS)

            logger.info("Routing %s -> %s to %s", source, target, self.vendor.name)
            payload = decode_transport_bytes(request.file_content)
            orchestrator = self._orchestrator(self.config.cloudconvert.poll_interval)
            remote = await orchestrator.convert(payload, request.file_name, target)
        except DocfluxError as e:
            logger.warning("Conversion of %s failed: %s", request.file_name, e.message)
            return _failure(ConversionResponse, e)

        return ConversionResponse(
            success=True, download_url=remote.download_url, filename=remote.filename
        )

    # ------------------------------------------------------------------
    # Summary / translation
    # ------------------------------------------------------------------

    def _read_text(self, content: str) -> str:
        return ensure_readable_text(decode_transport(content))

    async def summarize_document(self, request: SummaryRequest) -> SummaryResponse:
        logger.info("Summary request: %s (%s)", request.file_name, request.file_type)
        if not request.file_content or not request.file_name:
            return _failure(
                SummaryResponse,
                MalformedInput("Missing parameters: fileContent and fileName are required"),
            )
        try:
            text = self._read_text(request.file_content)
        except DocfluxError as e:
            return _failure(SummaryResponse, e)

        limit = self.config.summarizer.max_input_chars
        if len(text) > limit:
            logger.debug("Text truncated to %d characters", limit)
            text = text[:limit]
        return SummaryResponse(success=True, summary=self.summarizer.summarize(text))

    async def translate_document(self, request: TranslationRequest) -> TranslationResponse:
        logger.info(
            "Translation request: %s (%s) -> %s",
            request.file_name, request.file_type, request.target_language,
        )
        if not request.file_content or not request.file_name or not request.target_language:
            return _failure(
                TranslationResponse,
                MalformedInput(
                    "Missing parameters: fileContent, fileName and targetLanguage are required"
                ),
            )

        language = request.target_language.strip()
        if not _LANGUAGE_RE.match(language) or language not in self.config.translation.languages:
            return _failure(
                TranslationResponse,
                MalformedInput(
                    f"Unsupported target language: {language!r}. "
                    f"Supported: {', '.join(self.config.translation.languages)}"
                ),
            )

        try:
            text = self._read_text(request.file_content)
            text = truncate_for_vendor(text, self.config.translation.max_chars)
            translated = await self.translator.translate(text, language)
        except DocfluxError as e:
            logger.warning("Translation of %s failed: %s", request.file_name, e.message)
            return _failure(TranslationResponse, e)

        return TranslationResponse(success=True, translated_text=translated)

    # ------------------------------------------------------------------
    # PDF merge / split
    # ------------------------------------------------------------------

    async def merge_pdfs(self, request: MergeRequest) -> MergeResponse:
        limits = self.config.limits
        count = len(request.files)
        logger.info("PDF merge request: %d files", count)
        if count < limits.min_merge_files:
            return _failure(
                MergeResponse,
                MalformedInput(f"At least {limits.min_merge_files} PDF files are required to merge"),
            )
        if count > limits.max_merge_files:
            return _failure(
                MergeResponse,
                MalformedInput(f"At most {limits.max_merge_files} PDF files can be merged"),
            )

        try:
            uploads = [
                UploadFile(content=decode_transport_bytes(f.content), filename=f.filename)
                for f in request.files
            ]
            orchestrator = self._orchestrator(self.config.cloudconvert.pdf_poll_interval)
            result = await orchestrator.merge(uploads)
        except DocfluxError as e:
            logger.warning("PDF merge failed: %s", e.message)
            return _failure(MergeResponse, e)

        return MergeResponse(
            success=True, download_url=result.download_url, filename=result.filename
        )

    async def split_pdf(self, request: SplitRequest) -> SplitResponse:
        logger.info("PDF split request: %s (%s)", request.file_name, request.split_type)
        if not request.file_content or not request.file_name or not request.split_type:
            return _failure(
                SplitResponse,
                MalformedInput(
                    "Missing parameters: fileContent, fileName and splitType are required"
                ),
            )
        if request.split_type == "pages" and not request.pages:
            return _failure(
                SplitResponse, MalformedInput('Parameter pages is required for splitType "pages"')
            )
        if request.split_type == "range" and not request.page_ranges:
            return _failure(
                SplitResponse,
                MalformedInput('Parameter pageRanges is required for splitType "range"'),
            )

        pages = request.pages if request.split_type == "pages" else None
        ranges = request.page_ranges if request.split_type == "range" else None
        try:
            payload = decode_transport_bytes(request.file_content)
            orchestrator = self._orchestrator(self.config.cloudconvert.pdf_poll_interval)
            result = await orchestrator.split(payload, request.file_name, pages, ranges)
        except DocfluxError as e:
            logger.warning("PDF split of %s failed: %s", request.file_name, e.message)
            return _failure(SplitResponse, e)

        return SplitResponse(success=True, files=result.files)

    # ------------------------------------------------------------------
    # JSON boundary
    # ------------------------------------------------------------------

    async def handle(self, operation: str, payload: dict[str, Any]) -> dict[str, Any]:
        """Validate a raw JSON payload and dispatch it to the named operation."""
        routes = {
            "convert-file": (ConversionRequest, self.convert_file),
            "summarize-document": (SummaryRequest, self.summarize_document),
            "translate-document": (TranslationRequest, self.translate_document),
            "merge-pdf": (MergeRequest, self.merge_pdfs),
            "split-pdf": (SplitRequest, self.split_pdf),
        }
        route = routes.get(operation)
        if route is None:
            error = MalformedInput(
                f"Unknown operation {operation!r}. Supported: {', '.join(routes)}"
            )
            return ServiceResponse(
                success=False, error=error.message, error_kind=error.kind
            ).to_payload()

        request_cls, handler = route
        try:
            request = request_cls.model_validate(payload)
        except ValidationError as e:
            error = MalformedInput(f"Invalid request: {e.error_count()} validation error(s)")
            logger.warning("Rejected %s payload: %s", operation, e)
            return ServiceResponse(
                success=False, error=error.message, error_kind=error.kind
            ).to_payload()

        response = await handler(request)
        return response.to_payload()
