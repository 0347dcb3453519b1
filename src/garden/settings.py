"""Settings for a garden build, read from ``garden.toml`` and the environment.

Precedence, lowest first: built-in defaults, the TOML file (if present),
then environment variables::

    [paths]
    input = "./notes"

    [front_matter]
    public_field = "public"   # alias for the publish flag

    [ingest]
    workers = 8

    [logging]
    level = "INFO"

Environment variables (all optional):
    GARDEN_INPUT         - notes directory
    GARDEN_PUBLIC_FIELD  - header key of the publish flag
    GARDEN_WORKERS       - ingestion thread count
    GARDEN_LOG_LEVEL     - logging level name
"""

from __future__ import annotations

import logging
import os
import tomllib
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Mapping

from garden.errors import ConfigError

CONFIG_FILENAME = "garden.toml"

_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


@dataclass(frozen=True)
class PathSettings:
    input: Path = Path("./notes")


@dataclass(frozen=True)
class FrontMatterSettings:
    public_field: str = "public"


@dataclass(frozen=True)
class Settings:
    paths: PathSettings = field(default_factory=PathSettings)
    front_matter: FrontMatterSettings = field(default_factory=FrontMatterSettings)
    workers: int | None = None
    log_level: str = "INFO"


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------


def _table(data: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    value = data.get(name, {})
    if not isinstance(value, dict):
        raise ConfigError(f"[{name}] must be a table")
    return value


def _workers(value: Any) -> int | None:
    if value is None:
        return None
    try:
        workers = int(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"workers must be an integer, got {value!r}") from exc
    if workers < 1:
        raise ConfigError(f"workers must be at least 1, got {workers}")
    return workers


def _level(value: Any) -> str:
    level = str(value).upper()
    if level not in _LEVELS:
        raise ConfigError(f"unknown log level {value!r}")
    return level


def _from_mapping(settings: Settings, data: Mapping[str, Any]) -> Settings:
    paths = _table(data, "paths")
    unknown = set(paths) - {"input"}
    if unknown:
        raise ConfigError(f"unknown [paths] keys: {', '.join(sorted(unknown))}")
    front_matter = _table(data, "front_matter")
    ingest = _table(data, "ingest")
    log = _table(data, "logging")

    public_field = front_matter.get("public_field", settings.front_matter.public_field)
    if not isinstance(public_field, str) or not public_field:
        raise ConfigError("front_matter.public_field must be a non-empty string")

    return replace(
        settings,
        paths=replace(settings.paths, **{k: Path(v) for k, v in paths.items()}),
        front_matter=FrontMatterSettings(public_field=public_field),
        workers=_workers(ingest.get("workers", settings.workers)),
        log_level=_level(log.get("level", settings.log_level)),
    )


def _from_env(settings: Settings, env: Mapping[str, str]) -> Settings:
    paths = settings.paths
    if env.get("GARDEN_INPUT"):
        paths = replace(paths, input=Path(env["GARDEN_INPUT"]))
    front_matter = settings.front_matter
    if env.get("GARDEN_PUBLIC_FIELD"):
        front_matter = FrontMatterSettings(public_field=env["GARDEN_PUBLIC_FIELD"])
    return replace(
        settings,
        paths=paths,
        front_matter=front_matter,
        workers=_workers(env.get("GARDEN_WORKERS") or settings.workers),
        log_level=_level(env.get("GARDEN_LOG_LEVEL") or settings.log_level),
    )


def load_settings(
    path: Path | str | None = CONFIG_FILENAME,
    env: Mapping[str, str] | None = None,
) -> Settings:
    """Resolve settings from defaults, the TOML file at *path*, and *env*."""
    settings = Settings()
    if path is not None and Path(path).is_file():
        try:
            with open(path, "rb") as fh:
                data = tomllib.load(fh)
        except tomllib.TOMLDecodeError as exc:
            raise ConfigError(f"invalid TOML in {path}: {exc}") from exc
        settings = _from_mapping(settings, data)
    return _from_env(settings, os.environ if env is None else env)


def configure_logging(level: str = "INFO") -> None:
    """Send ``garden`` log records to stderr at *level*."""
    logging.basicConfig(
        level=getattr(logging, _level(level)),
        format="%(asctime)s %(levelname)-7s %(name)s: %(message)s",
    )
