from __future__ import annotations

"""Shared utilities: config loading, logging, product loading, and truncation."""

from dataclasses import dataclass, field
import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, TextIO, Tuple

import yaml

from pinmeta.models import ConfigError, InputParseError, ProductRecord


DEFAULT_BANNED_WORDS = ("pink", "rainbow")
DEFAULT_OVERRIDE_ENV = "ALLOW_PASTEL"
CONFIG_FILENAME = "config.yaml"


@dataclass(frozen=True)
class PathsConfig:
    """Filesystem locations used by the pipeline."""

    seo_dir: Path = Path("build/seo")
    pins_csv: Path = Path("build/pins/pins.csv")


@dataclass(frozen=True)
class LimitsConfig:
    """Maximum lengths for derived text fields."""

    meta_title: int = 60
    meta_description: int = 160
    image_alt_text: int = 150


@dataclass(frozen=True)
class ValidationConfig:
    """Banned-word settings."""

    banned_words: Tuple[str, ...] = DEFAULT_BANNED_WORDS
    override_env: str = DEFAULT_OVERRIDE_ENV
    allow_override: bool = False


@dataclass(frozen=True)
class AppConfig:
    """Top-level typed config container."""

    paths: PathsConfig = field(default_factory=PathsConfig)
    limits: LimitsConfig = field(default_factory=LimitsConfig)
    validation: ValidationConfig = field(default_factory=ValidationConfig)
    log_level: str = "INFO"


# Extra record attributes copied into the JSON envelope when present.
LOG_FIELDS = ("event", "handle", "word", "context")


class JsonFormatter(logging.Formatter):
    """JSON-lines formatter carrying the pipeline's event, handle and word fields."""

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "time": self.formatTime(record, self.datefmt),
        }
        for name in LOG_FIELDS:
            if hasattr(record, name):
                payload[name] = getattr(record, name)
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=True)


def setup_logging(level: int | str = logging.INFO, stream: Optional[TextIO] = None) -> None:
    """Route all pipeline logs to one JSON-lines handler (stderr by default).

    stdout stays free for the run summary.
    """
    handler = logging.StreamHandler(stream)
    handler.setFormatter(JsonFormatter())
    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(level)
    root.addHandler(handler)


def _section(raw: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    value = raw.get(name) or {}
    if not isinstance(value, Mapping):
        raise ConfigError(f"Config section '{name}' must be a mapping")
    return value


def load_config(config_path: Optional[Path] = None, environ: Optional[Mapping[str, str]] = None) -> AppConfig:
    """Parse YAML config file into typed dataclasses.

    A missing file yields the built-in defaults. The banned-word override is
    resolved here, once, from ``environ`` (``os.environ`` when omitted).
    """
    env = os.environ if environ is None else environ
    raw: Mapping[str, Any] = {}
    if config_path is not None and config_path.exists():
        with config_path.open("r", encoding="utf-8") as f:
            try:
                raw = yaml.safe_load(f) or {}
            except yaml.YAMLError as exc:
                raise ConfigError(f"Invalid YAML in {config_path}: {exc}") from exc
        if not isinstance(raw, Mapping):
            raise ConfigError(f"Config root in {config_path} must be a mapping")

    defaults = AppConfig()
    paths_raw = _section(raw, "paths")
    limits_raw = _section(raw, "limits")
    validation_raw = _section(raw, "validation")
    logging_raw = _section(raw, "logging")

    try:
        # Coerce configured paths into pathlib objects.
        paths = PathsConfig(
            seo_dir=Path(paths_raw.get("seo_dir", defaults.paths.seo_dir)),
            pins_csv=Path(paths_raw.get("pins_csv", defaults.paths.pins_csv)),
        )
        limits = LimitsConfig(
            meta_title=int(limits_raw.get("meta_title", defaults.limits.meta_title)),
            meta_description=int(limits_raw.get("meta_description", defaults.limits.meta_description)),
            image_alt_text=int(limits_raw.get("image_alt_text", defaults.limits.image_alt_text)),
        )
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Invalid paths/limits config: {exc}") from exc

    banned_words = validation_raw.get("banned_words", list(DEFAULT_BANNED_WORDS))
    if not isinstance(banned_words, list) or not all(isinstance(w, str) for w in banned_words):
        raise ConfigError("validation.banned_words must be a list of strings")
    override_env = str(validation_raw.get("override_env", DEFAULT_OVERRIDE_ENV))
    validation = ValidationConfig(
        banned_words=tuple(banned_words),
        override_env=override_env,
        # Only the exact string "true" enables the override.
        allow_override=env.get(override_env) == "true",
    )
    log_level = str(logging_raw.get("level", defaults.log_level)).upper()
    return AppConfig(paths=paths, limits=limits, validation=validation, log_level=log_level)


def load_products(input_path: Path) -> List[ProductRecord]:
    """Read a JSON array of products from disk; fields are checked only when used."""
    try:
        raw_json = input_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise InputParseError(f"Unable to read input file {input_path}: {exc}") from exc
    try:
        decoded = json.loads(raw_json)
    except json.JSONDecodeError as exc:
        raise InputParseError(f"Input file {input_path} is not valid JSON: {exc}") from exc
    if not isinstance(decoded, list):
        raise InputParseError(f"Input file {input_path} must contain a JSON array")
    return [ProductRecord.from_dict(item, index=index) for index, item in enumerate(decoded)]


def truncate_text(text: str, max_length: int) -> str:
    """Cut text to max_length characters, then strip surrounding whitespace."""
    if len(text) > max_length:
        return text[:max_length].strip()
    return text.strip()


def resolve_project_root() -> Path:
    """Return the directory holding main.py and the shipped config.yaml."""
    return Path(__file__).resolve().parent.parent


def resolve_config_path(cwd: Optional[Path] = None) -> Path:
    """Prefer config.yaml in the working directory, then the shipped one.

    The returned path may not exist; load_config then uses defaults.
    """
    local = (cwd or Path.cwd()) / CONFIG_FILENAME
    if local.exists():
        return local
    return resolve_project_root() / CONFIG_FILENAME
