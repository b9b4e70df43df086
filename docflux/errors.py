"""Error kinds shared by converters, the summarizer and vendor clients."""

from __future__ import annotations

from typing import ClassVar


class DocfluxError(Exception):
    """Base class for every expected failure. ``kind`` names the category."""

    kind: ClassVar[str] = "Error"

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class DecodeError(DocfluxError):
    """Transport-encoded content could not be decoded to text."""

    kind = "DecodeError"


class UnsupportedConversion(DocfluxError):
    """No local converter exists for the requested pair."""

    kind = "UnsupportedConversion"

    def __init__(
        self,
        source: str,
        target: str,
        supported: tuple[str, ...] | list[str] = (),
        requires_remote: bool = True,
    ) -> None:
        self.source = source
        self.target = target
        self.supported = tuple(supported)
        self.requires_remote = requires_remote
        message = f"Unsupported conversion: {source} -> {target}"
        if self.supported:
            message += f". Supported formats: {', '.join(self.supported)}"
        super().__init__(message)


class MalformedInput(DocfluxError):
    """Input is structurally invalid for the requested operation."""

    kind = "MalformedInput"


class EmptyOrUnreadableInput(DocfluxError):
    """Decoded content is empty or does not look like text."""

    kind = "EmptyOrUnreadableInput"


class RemoteServiceError(DocfluxError):
    """A vendor API returned a non-success answer."""

    kind = "RemoteServiceError"

    def __init__(
        self,
        vendor: str,
        operation: str,
        detail: str,
        *,
        retryable: bool = False,
        status_code: int | None = None,
    ) -> None:
        self.vendor = vendor
        self.operation = operation
        self.detail = detail
        self.retryable = retryable
        self.status_code = status_code
        super().__init__(f"{vendor} {operation} failed: {detail}")


class ServiceUnavailable(RemoteServiceError):
    """Vendor unreachable or answering with a server error."""

    def __init__(
        self,
        vendor: str,
        operation: str,
        detail: str = "Service temporarily unavailable",
        *,
        status_code: int | None = None,
    ) -> None:
        super().__init__(
            vendor, operation, detail, retryable=True, status_code=status_code
        )


class InvalidPayload(RemoteServiceError):
    """Vendor rejected the submitted payload."""

    def __init__(
        self,
        vendor: str,
        operation: str,
        detail: str,
        *,
        status_code: int | None = None,
    ) -> None:
        super().__init__(
            vendor, operation, detail, retryable=False, status_code=status_code
        )


class ConversionTimeout(DocfluxError):
    """Polling exceeded the maximum attempt bound."""

    kind = "Timeout"

    def __init__(self, job_id: str, attempts: int) -> None:
        self.job_id = job_id
        self.attempts = attempts
        super().__init__(
            f"Timed out waiting for job {job_id} after {attempts} attempts"
        )


__all__ = [
    "ConversionTimeout",
    "DecodeError",
    "DocfluxError",
    "EmptyOrUnreadableInput",
    "InvalidPayload",
    "MalformedInput",
    "RemoteServiceError",
    "ServiceUnavailable",
    "UnsupportedConversion",
]
