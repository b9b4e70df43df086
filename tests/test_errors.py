"""Tests for the error taxonomy."""

import pytest

from docflux.errors import (
    ConversionTimeout,
    DecodeError,
    DocfluxError,
    EmptyOrUnreadableInput,
    InvalidPayload,
    MalformedInput,
    RemoteServiceError,
    ServiceUnavailable,
    UnsupportedConversion,
)


@pytest.mark.parametrize(
    "error, kind",
    [
        (DecodeError("x"), "DecodeError"),
        (UnsupportedConversion("pdf", "pptx"), "UnsupportedConversion"),
        (MalformedInput("x"), "MalformedInput"),
        (RemoteServiceError("v", "op", "x"), "RemoteServiceError"),
        (ServiceUnavailable("v", "op"), "RemoteServiceError"),
        (InvalidPayload("v", "op", "x"), "RemoteServiceError"),
        (ConversionTimeout("job", 30), "Timeout"),
        (EmptyOrUnreadableInput("x"), "EmptyOrUnreadableInput"),
    ],
)
def test_kinds(error, kind):
    assert isinstance(error, DocfluxError)
    assert error.kind == kind
    assert error.message


def test_unsupported_lists_supported_formats():
    err = UnsupportedConversion("pdf", "pptx", ("txt", "csv"))
    assert err.message == "Unsupported conversion: pdf -> pptx. Supported formats: txt, csv"
    assert (err.source, err.target) == ("pdf", "pptx")


def test_remote_error_message_includes_vendor_detail():
    err = RemoteServiceError("cloudconvert", "submit_job", "Invalid API key", status_code=401)
    assert str(err) == "cloudconvert submit_job failed: Invalid API key"
    assert err.retryable is False


def test_service_unavailable_is_retryable():
    err = ServiceUnavailable("mymemory", "translate", status_code=503)
    assert err.retryable is True
    assert err.detail == "Service temporarily unavailable"


def test_timeout_is_not_a_remote_error():
    assert not isinstance(ConversionTimeout("job", 3), RemoteServiceError)
