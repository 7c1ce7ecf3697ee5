from __future__ import annotations

import json
from dataclasses import replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, TypeVar, Union
from urllib.parse import ParseResult, unquote, urlparse

from loguru import logger
from pydantic import BaseModel, ValidationError

from .config import (
    ListWorkEstimatorConfig,
    MutatingWorkEstimatorConfig,
    WorkEstimatorConfig,
    default_list_work_estimator_config,
    default_mutating_work_estimator_config,
    default_work_estimator_config,
)
from .schemas import (
    ListWorkEstimatorConfigSchema,
    MutatingWorkEstimatorConfigSchema,
    WorkEstimatorConfigSchema,
)


ConfigSource = Union[Mapping[str, Any], Path, str]

_NESTED_FIELDS = ("list_config", "mutating_config")

_Config = TypeVar(
    "_Config", ListWorkEstimatorConfig, MutatingWorkEstimatorConfig, WorkEstimatorConfig
)


class ConfigLoadError(Exception):
    """Raised when a work estimator config cannot be read or understood."""


def _parse_json(text: str, origin: str) -> Mapping[str, Any]:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ConfigLoadError(f"Invalid JSON in {origin}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigLoadError(f"Expected a JSON object in {origin}, got {type(data).__name__}")
    return data


def _read_json_file(path: Path) -> Mapping[str, Any]:
    if not path.is_file():
        raise ConfigLoadError(f"Config file not found: {path}")
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        logger.exception("Failed to read config file {}", path)
        raise ConfigLoadError(str(exc)) from exc
    return _parse_json(text, str(path))


def _file_uri_to_path(parsed_url: ParseResult) -> Path:
    path_str = unquote(parsed_url.path)
    if parsed_url.netloc:
        path_str = f"//{parsed_url.netloc}{path_str}"
    if path_str.startswith("/") and len(path_str) >= 3 and path_str[2] == ":":
        path_str = path_str.lstrip("/")
    return Path(path_str).expanduser()


def _read_source(source: ConfigSource) -> Mapping[str, Any]:
    if isinstance(source, Mapping):
        return source
    if isinstance(source, Path):
        return _read_json_file(source.expanduser())
    if isinstance(source, str):
        if source.lstrip().startswith("{"):
            return _parse_json(source, "<string>")
        parsed = urlparse(source)
        if parsed.scheme == "file":
            return _read_json_file(_file_uri_to_path(parsed))
        return _read_json_file(Path(source).expanduser())
    raise ConfigLoadError(f"Unsupported config source type: {type(source).__name__}")


def _set_fields(schema: BaseModel, skip: tuple = ()) -> Dict[str, Any]:
    return {
        name: getattr(schema, name)
        for name in type(schema).model_fields
        if name not in skip and getattr(schema, name) is not None
    }


def _overlay(base: _Config, schema: Optional[BaseModel], skip: tuple = ()) -> _Config:
    if schema is None:
        return base
    changes = _set_fields(schema, skip)
    return replace(base, **changes) if changes else base


def _to_config(
    schema: WorkEstimatorConfigSchema, base: WorkEstimatorConfig
) -> WorkEstimatorConfig:
    list_config = base.list_config
    if schema.list_config is not None:
        list_config = _overlay(
            list_config or default_list_work_estimator_config(), schema.list_config
        )

    mutating_config = base.mutating_config
    if schema.mutating_config is not None:
        mutating_config = _overlay(
            mutating_config or default_mutating_work_estimator_config(),
            schema.mutating_config,
        )

    merged = _overlay(base, schema, skip=_NESTED_FIELDS)
    return replace(merged, list_config=list_config, mutating_config=mutating_config)


def load_work_estimator_config(
    source: ConfigSource, base: Optional[WorkEstimatorConfig] = None
) -> WorkEstimatorConfig:
    """Overlay an external work estimator config onto ``base``.

    ``source`` may be a mapping, a JSON object string, a path or a ``file://``
    URI. Keys missing from the source keep the value from ``base``, which
    defaults to :func:`default_work_estimator_config`. Seat bounds and per-seat
    divisors are taken as given.
    """
    data = _read_source(source)
    try:
        schema = WorkEstimatorConfigSchema.model_validate(data)
    except ValidationError as exc:
        raise ConfigLoadError(f"Invalid work estimator config: {exc}") from exc

    if base is None:
        base = default_work_estimator_config()
    config = _to_config(schema, base)
    logger.debug("Loaded work estimator config {}", config)
    return config


def _to_schema(config: WorkEstimatorConfig) -> WorkEstimatorConfigSchema:
    list_schema = None
    if config.list_config is not None:
        list_schema = ListWorkEstimatorConfigSchema(
            objects_per_seat=config.list_config.objects_per_seat
        )

    mutating_schema = None
    if config.mutating_config is not None:
        mutating = config.mutating_config
        mutating_schema = MutatingWorkEstimatorConfigSchema(
            enabled=mutating.enabled,
            event_additional_duration=mutating.event_additional_duration,
            watches_per_seat=mutating.watches_per_seat,
        )

    return WorkEstimatorConfigSchema(
        list_config=list_schema,
        mutating_config=mutating_schema,
        minimum_seats=config.minimum_seats,
        maximum_seats=config.maximum_seats,
    )


def dump_work_estimator_config(config: WorkEstimatorConfig) -> Dict[str, Any]:
    """Return the external (camelCase) representation of ``config``."""
    return _to_schema(config).model_dump(mode="json", by_alias=True, exclude_none=True)


def dumps_work_estimator_config(config: WorkEstimatorConfig, indent: Optional[int] = 2) -> str:
    return json.dumps(dump_work_estimator_config(config), indent=indent)
