"""YAML config loading with env var expansion."""

import os
import re
from collections.abc import Iterator
from pathlib import Path

import yaml
from pydantic import ValidationError

from .models import DocfluxConfig


def _candidate_paths(cli_path: str | None) -> Iterator[Path]:
    """Config files in priority order: CLI > project-local > user-global."""
    if cli_path:
        path = Path(cli_path)
        if not path.exists():
            raise ValueError(f"Config file not found: {cli_path}")
        yield path
    yield Path("./docflux.yaml")
    yield Path.home() / ".docflux" / "config.yaml"


def _read_mapping(path: Path) -> dict | None:
    """Parsed, env-expanded YAML mapping from *path*; None for an empty file."""
    try:
        with open(path) as f:
            raw = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in {path}: {e}") from e
    if raw is None:
        return None
    if not isinstance(raw, dict):
        raise ValueError(f"Invalid config in {path}: expected a mapping")
    return _expand_env_vars(raw)


def load_config(cli_path: str | None = None) -> DocfluxConfig:
    """Load the first non-empty config file, falling back to defaults.

    An empty file is skipped, so the next candidate still applies.
    """
    for path in _candidate_paths(cli_path):
        if not path.exists():
            continue
        raw = _read_mapping(path)
        if raw is None:
            continue
        try:
            return DocfluxConfig(**raw)
        except ValidationError as e:
            raise ValueError(f"Invalid config in {path}: {e}") from e

    return DocfluxConfig()


def _expand_env_vars(obj: object) -> object:
    """Recursively expand ${VAR} references in strings."""
    if isinstance(obj, str):
        return re.sub(r"\$\{(\w+)\}", lambda m: os.environ.get(m.group(1), ""), obj)
    elif isinstance(obj, dict):
        return {k: _expand_env_vars(v) for k, v in obj.items()}
    elif isinstance(obj, list):
        return [_expand_env_vars(v) for v in obj]
    return obj


# Default YAML template for `docflux config init`
DEFAULT_CONFIG_TEMPLATE = """\
# docflux.yaml

# Remote conversion vendor (CloudConvert job API)
cloudconvert:
  api_key_env: "CLOUDCONVERT_API_KEY"   # the key itself stays in the environment
  base_url: "https://api.cloudconvert.com/v2"
  timeout: 60
  poll_interval: 2.0             # seconds between status polls (conversions)
  pdf_poll_interval: 10.0        # seconds between status polls (merge/split)
  max_attempts: 30

# Remote translation vendor
translation:
  provider: "mymemory"
  base_url: "https://api.mymemory.translated.net"
  # contact_email: "you@example.com"
  max_chars: 3000
  timeout: 30
  languages: [en, es, fr, de, pt, ru, zh, ja, it]

# Extractive summarizer
summarizer:
  min_input_chars: 100
  max_input_chars: 5000
  min_sentence_chars: 20
  max_sentence_chars: 300
  max_candidates: 20
  max_sentences: 4

# Request limits
limits:
  max_file_size_mb: 10
  min_merge_files: 2
  max_merge_files: 10

# Logging
log_level: "info"              # debug | info | warn | error
log_format: "text"             # text | json
"""
