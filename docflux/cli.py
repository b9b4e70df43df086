"""CLI entry point for docflux."""

from __future__ import annotations

import asyncio
import base64
import json
import logging
import os
from pathlib import Path
from typing import Annotated

import typer
import yaml
from rich import print as rprint
from rich.logging import RichHandler
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table

from docflux.config import DocfluxConfig, load_config
from docflux.config.loader import DEFAULT_CONFIG_TEMPLATE
from docflux.converter.dispatcher import canonical_extension, local_pairs
from docflux.remote import create_vendor
from docflux.remote.models import PageRange
from docflux.service import (
    ConversionRequest,
    DocumentService,
    MergeFile,
    MergeRequest,
    SplitRequest,
    SummaryRequest,
    TranslationRequest,
)
from docflux.service.models import ServiceResponse
from docflux.transport import decode_transport_bytes

app = typer.Typer(
    name="docflux",
    help="Convert, summarize, translate, merge and split documents.",
)

config_app = typer.Typer(help="Manage docflux configuration.")
app.add_typer(config_app, name="config")

logger = logging.getLogger(__name__)

# Global state
_config: DocfluxConfig | None = None


def _get_config() -> DocfluxConfig:
    if _config is None:
        return load_config()
    return _config


class JsonFormatter(logging.Formatter):
    """One JSON object per log line."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "time": self.formatTime(record),
            "level": record.levelname.lower(),
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            entry["exc"] = self.formatException(record.exc_info)
        return json.dumps(entry)


def setup_logging(level: str, fmt: str) -> None:
    """Configure the root logger from the config's log settings."""
    numeric = logging.WARNING if level == "warn" else getattr(logging, level.upper())
    if fmt == "json":
        handler: logging.Handler = logging.StreamHandler()
        handler.setFormatter(JsonFormatter())
    else:
        handler = RichHandler(show_path=False, rich_tracebacks=True)
    logging.basicConfig(level=numeric, handlers=[handler], force=True, format="%(message)s")
    for noisy in ("httpx", "httpcore"):
        logging.getLogger(noisy).setLevel(logging.WARNING)


@app.callback()
def main(
    config: Annotated[
        str | None, typer.Option("--config", "-c", help="Path to docflux.yaml")
    ] = None,
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Enable debug logging")
    ] = False,
) -> None:
    """Global options."""
    global _config
    try:
        _config = load_config(config)
    except ValueError as e:
        rprint(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    setup_logging("debug" if verbose else _config.log_level, _config.log_format)


def _build_service(cfg: DocfluxConfig) -> DocumentService:
    """Service wired with the CloudConvert vendor when its API key is set."""
    vendor = None
    if os.environ.get(cfg.cloudconvert.api_key_env):
        vendor = create_vendor(cfg.cloudconvert)
    else:
        logger.debug("%s not set; remote conversions disabled", cfg.cloudconvert.api_key_env)
    return DocumentService(cfg, vendor=vendor)


async def _call(cfg: DocfluxConfig, method: str, request) -> ServiceResponse:
    service = _build_service(cfg)
    try:
        return await getattr(service, method)(request)
    finally:
        await service.aclose()


def _run(method: str, request) -> ServiceResponse:
    response = asyncio.run(_call(_get_config(), method, request))
    if not response.success:
        rprint(f"[red]Error:[/red] {response.error}")
        raise typer.Exit(1)
    return response


def _read_encoded(file: Path) -> str:
    if not file.is_file():
        rprint(f"[red]Error:[/red] File not found: {file}")
        raise typer.Exit(1)
    return base64.b64encode(file.read_bytes()).decode("ascii")


def _parse_range(value: str) -> PageRange:
    start, sep, end = value.partition("-")
    try:
        if not sep:
            raise ValueError(value)
        return PageRange(start=int(start), end=int(end))
    except ValueError:
        raise typer.BadParameter(f"Invalid page range '{value}': expected A-B") from None


def _save_download(url: str, out: Path) -> None:
    """Write a data URL result to disk; remote URLs are printed instead."""
    if url.startswith("data:"):
        out.write_bytes(decode_transport_bytes(url))
        rprint(f"[green]Saved[/green] {out}")
    else:
        rprint(f"[green]Download:[/green] {url}")


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


@app.command()
def convert(
    file: Path = typer.Argument(..., help="File to convert"),
    to: str = typer.Option(..., "--to", "-t", help="Target format (txt, html, csv, json, xml, pdf ...)"),
    output: Path | None = typer.Option(None, "--output", "-o", help="Output path"),
) -> None:
    """Convert a document to another format."""
    request = ConversionRequest(
        file_content=_read_encoded(file),
        file_name=file.name,
        source_format=canonical_extension("", file.name),
        target_format=to,
        file_size=file.stat().st_size,
    )
    response = _run("convert_file", request)
    _save_download(response.download_url, output or file.with_name(response.filename))


@app.command()
def summarize(
    file: Path = typer.Argument(..., help="Text file to summarize"),
) -> None:
    """Print an extractive summary of a text document."""
    request = SummaryRequest(
        file_content=_read_encoded(file),
        file_name=file.name,
        file_type=canonical_extension("", file.name),
    )
    response = _run("summarize_document", request)
    rprint(Panel(response.summary, title=f"Summary of {file.name}", border_style="blue"))


@app.command()
def translate(
    file: Path = typer.Argument(..., help="Text file to translate"),
    lang: str = typer.Option(..., "--lang", "-l", help="Target language code"),
    output: Path | None = typer.Option(None, "--output", "-o", help="Write translation here"),
) -> None:
    """Translate a text document."""
    request = TranslationRequest(
        file_content=_read_encoded(file),
        file_name=file.name,
        file_type=canonical_extension("", file.name),
        target_language=lang,
    )
    response = _run("translate_document", request)
    if output:
        output.write_text(response.translated_text)
        rprint(f"[green]Saved[/green] {output}")
    else:
        rprint(response.translated_text)


@app.command()
def merge(
    files: list[Path] = typer.Argument(..., help="PDF files to merge, in order"),
    output: Path | None = typer.Option(None, "--output", "-o", help="Output path"),
) -> None:
    """Merge several PDF files into one."""
    request = MergeRequest(
        files=[MergeFile(content=_read_encoded(f), filename=f.name) for f in files]
    )
    response = _run("merge_pdfs", request)
    if output:
        _save_download(response.download_url, output)
    else:
        rprint(f"[green]Merged[/green] {response.filename}: {response.download_url}")


@app.command()
def split(
    file: Path = typer.Argument(..., help="PDF file to split"),
    pages: str | None = typer.Option(None, "--pages", help="Page selection, e.g. '1,3,5-7'"),
    ranges: list[str] = typer.Option([], "--range", help="Page range A-B (repeatable)"),
) -> None:
    """Split a PDF by pages or page ranges."""
    if bool(pages) == bool(ranges):
        rprint("[red]Error:[/red] Give exactly one of --pages or --range")
        raise typer.Exit(1)
    request = SplitRequest(
        file_content=_read_encoded(file),
        file_name=file.name,
        split_type="pages" if pages else "range",
        pages=pages,
        page_ranges=[_parse_range(r) for r in ranges] or None,
    )
    response = _run("split_pdf", request)

    table = Table(title=f"Parts ({len(response.files or [])})")
    table.add_column("File", style="cyan")
    table.add_column("URL", style="green")
    for part in response.files or []:
        table.add_row(part.filename, part.url)
    rprint(table)


@app.command()
def formats() -> None:
    """List conversions handled locally."""
    table = Table(title="Local conversions")
    table.add_column("From", style="cyan")
    table.add_column("To", style="green")
    for source, target in local_pairs():
        table.add_row(source, target)
    rprint(table)
    rprint("[dim]Other pairs are routed to CloudConvert when CLOUDCONVERT_API_KEY is set.[/dim]")


@config_app.command("show")
def config_show() -> None:
    """Show current resolved configuration."""
    cfg = _get_config()
    rprint(Syntax(yaml.dump(cfg.model_dump(), default_flow_style=False), "yaml"))


@config_app.command("init")
def config_init(
    force: bool = typer.Option(False, "--force", help="Overwrite existing config"),
) -> None:
    """Create default docflux.yaml in current directory."""
    target = Path("docflux.yaml")
    if target.exists() and not force:
        rprint("[yellow]docflux.yaml already exists.[/yellow] Use --force to overwrite.")
        raise typer.Exit(1)
    target.write_text(DEFAULT_CONFIG_TEMPLATE)
    rprint(f"[green]Created[/green] {target}")
