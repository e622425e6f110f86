"""Prepper-backed configuration loader for locdict."""

from __future__ import annotations

import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Iterator, Literal, Mapping, Sequence

from dotenv import dotenv_values
from prepper import (
    Field,
    IoError,
    SchemaError,
    SchemaModel,
    ValidationError,
    model_validator,
)
from prepper.config import ConfigInstance
from prepper.loaders import _parse_file, _path_to_source, discover_file_paths
from prepper.merge import merge_layer
from prepper.provenance import ProvenanceRecorder

from .errors import ConfigurationError

APP_NAME = "locdict"
ENV_PREFIX = "LOCDICT_"

logger = logging.getLogger(__name__)


class LocdictConfig(SchemaModel):
    """Schema describing all supported configuration options."""

    LOCDICT_COMMENT_PREFIX: str = Field(
        default="# ",
        description="Prefix of the leading comment lines skipped in record files.",
    )
    LOCDICT_STRICT_PLACEHOLDERS: bool = Field(
        default=False,
        description="Fail instead of keeping the source text on placeholder mismatch.",
    )
    LOCDICT_LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="WARNING",
        description="Console log level used when no -v flag is given.",
    )
    LOCDICT_LOG_FILE: str | None = Field(default=None)

    @model_validator(mode="before")
    def _normalise_log_level(data: Any) -> Any:
        if isinstance(data, dict):
            raw_value = data.get("LOCDICT_LOG_LEVEL")
            if isinstance(raw_value, str):
                normalized = raw_value.strip().upper()
                synonyms = {"WARN": "WARNING", "ERR": "ERROR"}
                data["LOCDICT_LOG_LEVEL"] = synonyms.get(normalized, normalized)
        return data


@lru_cache(maxsize=1)
def _load_config_instance(app_dir: Path | None = None) -> ConfigInstance:
    """Load configuration layers once and cache the immutable instance."""

    base_dir = app_dir or Path.cwd()
    try:
        provenance = ProvenanceRecorder()
        combined: dict[str, Any] = {}
        for layer, source in _file_layers(base_dir):
            merge_layer(combined, layer, provenance=provenance, source=source, layer="file")
        for layer, source in _env_layers(base_dir):
            merge_layer(combined, layer, provenance=provenance, source=source, layer="env")

        model = LocdictConfig.validate(combined, provenance=provenance)
        _validate_settings(model)

        return ConfigInstance(
            model=model,
            provenance=provenance,
            env_prefix=None,
            schema_cls=LocdictConfig,
        )
    except IoError as exc:
        raise ConfigurationError(
            f"Configuration files could not be read: {exc}"
        ) from exc
    except SchemaError as exc:
        raise ConfigurationError(f"Configuration schema error: {exc}") from exc
    except ValidationError as exc:
        issues = _format_validation_errors(exc.to_dict())
        raise ConfigurationError(issues) from exc


def _file_layers(app_dir: Path) -> Iterator[tuple[Mapping[str, Any], str]]:
    """Yield every discovered YAML file as (mapping, provenance source)."""

    for path, label in discover_file_paths(
        APP_NAME, "yaml", app_dir=app_dir, extra_paths=None
    ):
        parsed = _parse_file(path, "yaml")
        if not isinstance(parsed, Mapping):
            raise IoError(f"{path} must hold a mapping of settings at its root.")
        yield parsed, _path_to_source(label, "yaml", path)


def _env_layers(app_dir: Path) -> Iterator[tuple[Mapping[str, Any], str]]:
    """Yield the .env file, then the process environment, restricted to known keys."""

    known = set(LocdictConfig.__field_infos__.keys())
    dotenv_path = app_dir / ".env"
    sources: list[tuple[str, Mapping[str, str | None]]] = []
    if dotenv_path.exists():
        sources.append((".env", dotenv_values(dotenv_path)))
    sources.append(("process", os.environ))

    for origin, values in sources:
        for key in sorted(values):
            if not key.startswith(ENV_PREFIX):
                continue
            value = values[key]
            if key not in known:
                logger.warning("Ignoring unknown setting %s from %s.", key, origin)
                continue
            if value is not None:
                yield {key: value}, f"env:{origin}:{key}"


def _validate_settings(settings: LocdictConfig) -> None:
    errors: list[str] = []

    if not settings.LOCDICT_COMMENT_PREFIX:
        errors.append(
            "LOCDICT_COMMENT_PREFIX must not be empty; every line would be skipped."
        )
    if "\t" in settings.LOCDICT_COMMENT_PREFIX:
        errors.append("LOCDICT_COMMENT_PREFIX must not contain a tab character.")

    if errors:
        bullet_list = "\n".join(f"- {message}" for message in errors)
        raise ConfigurationError(
            "Configuration validation errors detected:\n" + bullet_list
        )


def _format_validation_errors(entries: Sequence[dict[str, Any]]) -> str:
    lines = ["Configuration validation errors detected:"]
    for entry in entries:
        path = entry.get("path") or []
        if isinstance(path, (list, tuple)):
            path = ".".join(str(part) for part in path if part not in {None, ""})
        line = f"- {path}: " if path else "- "
        line += str(entry.get("message") or entry.get("msg") or "Invalid value")
        if entry.get("source"):
            line += f" (from {entry['source']})"
        lines.append(line)
    return "\n".join(lines)


def get_config(app_dir: Path | None = None) -> ConfigInstance:
    """Return the immutable configuration instance."""

    return _load_config_instance(app_dir=app_dir)


def get_settings(app_dir: Path | None = None) -> LocdictConfig:
    """Return the validated schema model for typed access."""

    return get_config(app_dir=app_dir).model()
