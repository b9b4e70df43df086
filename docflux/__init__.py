"""docflux - local document conversion, extractive summaries and vendor-backed PDF/translation jobs."""

from docflux.config import DocfluxConfig, load_config
from docflux.converter import convert, dispatch
from docflux.errors import DocfluxError
from docflux.remote import RemoteJobOrchestrator, create_vendor
from docflux.service import DocumentService
from docflux.summarizer import ExtractiveSummarizer, summarize
from docflux.translate import MyMemoryTranslator, Translator

__version__ = "0.1.0"

__all__ = [
    "DocfluxConfig",
    "DocfluxError",
    "DocumentService",
    "ExtractiveSummarizer",
    "MyMemoryTranslator",
    "RemoteJobOrchestrator",
    "Translator",
    "convert",
    "create_vendor",
    "dispatch",
    "load_config",
    "summarize",
]
