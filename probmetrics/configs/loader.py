from __future__ import annotations

import json
import os
import pathlib
import re
from dataclasses import dataclass
from typing import Any, Iterable, Mapping, MutableMapping

import jsonschema
import yaml

from .fingerprint import compute_fingerprint

CONFIG_ROOT = pathlib.Path(__file__).resolve().parent
SCHEMA_DIR = CONFIG_ROOT / "schemas"
PROFILE_DIR = CONFIG_ROOT / "profiles"


class IncludeLoader(yaml.SafeLoader):
    pass


def _construct_include(loader: yaml.SafeLoader, node: yaml.Node) -> Any:
    rel_path = loader.construct_scalar(node)
    include_path = pathlib.Path(loader.name).parent / rel_path
    with include_path.open("r", encoding="utf-8") as f:
        return yaml.load(f, IncludeLoader)


IncludeLoader.add_constructor("!include", _construct_include)


@dataclass
class ResolvedConfig:
    resolved: Mapping[str, Any]
    sources: list[str]
    fingerprint: str
    schema_version: str


_REF_PATTERN = re.compile(r"\$\{([^}]+)\}")


def _load_yaml(path: pathlib.Path) -> Mapping[str, Any]:
    with path.open("r", encoding="utf-8") as f:
        loader = IncludeLoader(f)
        loader.name = str(path)
        try:
            data = loader.get_single_data()
        finally:
            loader.dispose()
    return data or {}


def _merge(base: Any, override: Any) -> Any:
    if not (isinstance(base, Mapping) and isinstance(override, Mapping)):
        return override
    result: dict[str, Any] = dict(base)
    for k, v in override.items():
        # null deletes the key
        if v is None:
            result.pop(k, None)
        else:
            result[k] = _merge(result.get(k), v)
    return result


def _merge_many(dicts: Iterable[Mapping[str, Any]]) -> Mapping[str, Any]:
    merged: Any = {}
    for d in dicts:
        merged = _merge(merged, d)
    return merged


def _parse_value(val: str) -> Any:
    if val.lower() in ("true", "false"):
        return val.lower() == "true"
    try:
        return json.loads(val)
    except ValueError:
        return val


def _apply_env_overrides(prefix: str) -> Mapping[str, Any]:
    result: dict[str, Any] = {}
    for key, value in os.environ.items():
        if not key.startswith(prefix):
            continue
        path = key[len(prefix) :].strip("_").lower()
        parts = [p for p in path.split("__") if p]
        if not parts:
            continue
        cursor: MutableMapping[str, Any] = result
        for p in parts[:-1]:
            cursor = cursor.setdefault(p, {})  # type: ignore[assignment]
        cursor[parts[-1]] = _parse_value(value)
    return result


def _apply_cli_overrides(overrides: Mapping[str, Any]) -> Mapping[str, Any]:
    def cast(obj: Any) -> Any:
        if isinstance(obj, str):
            return _parse_value(obj)
        if isinstance(obj, Mapping):
            return {k: cast(v) for k, v in obj.items()}
        return obj

    return cast(overrides or {})


def _resolve_refs(config: Any, full: Mapping[str, Any]) -> Any:
    if isinstance(config, str):
        match_all = _REF_PATTERN.fullmatch(config)

        def lookup(expr: str) -> Any:
            if expr.startswith("ENV:"):
                name_default = expr[4:]
                if "|" in name_default:
                    name, default = name_default.split("|", 1)
                else:
                    name, default = name_default, ""
                return os.environ.get(name, default)
            cursor: Any = full
            for part in expr.split("."):
                cursor = cursor.get(part) if isinstance(cursor, Mapping) else None
            return cursor

        # a lone reference keeps the referenced type
        if match_all:
            value = lookup(match_all.group(1))
            if isinstance(value, str):
                return _parse_value(value)
            return value

        def replace(match: re.Match[str]) -> str:
            value = lookup(match.group(1))
            return str(value) if value is not None else ""

        return _REF_PATTERN.sub(replace, config)
    if isinstance(config, Mapping):
        return {k: _resolve_refs(v, full) for k, v in config.items()}
    if isinstance(config, list):
        return [_resolve_refs(v, full) for v in config]
    return config


def _validate(resolved: Mapping[str, Any]) -> None:
    schema_files = {
        "logging": SCHEMA_DIR / "logging.json",
        "log_loss": SCHEMA_DIR / "log_loss.json",
    }
    for key, schema_path in schema_files.items():
        section = resolved.get(key)
        if section is None:
            continue
        with schema_path.open("r", encoding="utf-8") as f:
            schema = json.load(f)
        jsonschema.validate(section, schema)


def _profile_path(profile: str | pathlib.Path) -> pathlib.Path:
    path = pathlib.Path(profile)
    if path.suffix in (".yaml", ".yml"):
        return path
    return PROFILE_DIR / f"{profile}.yaml"


def load_config(
    profile: str | pathlib.Path | None = None,
    overrides_paths: list[pathlib.Path] | None = None,
    cli_overrides: Mapping[str, Any] | None = None,
    env_prefix: str = "PROBMETRICS_",
) -> ResolvedConfig:
    """Resolve layered config: defaults -> profile -> files -> env -> CLI."""
    overrides_paths = overrides_paths or []
    layers: list[Mapping[str, Any]] = []
    sources: list[str] = []

    defaults_path = CONFIG_ROOT / "defaults.yaml"
    layers.append(_load_yaml(defaults_path))
    sources.append(str(defaults_path))

    if profile is not None:
        profile_path = _profile_path(profile)
        if not profile_path.exists():
            raise FileNotFoundError(f"Config profile not found: {profile_path}")
        layers.append(_load_yaml(profile_path))
        sources.append(str(profile_path))

    for path in overrides_paths:
        path = pathlib.Path(path)
        layers.append(_load_yaml(path))
        sources.append(str(path))

    env_layer = _apply_env_overrides(env_prefix)
    if env_layer:
        layers.append(env_layer)
        sources.append(f"env:{env_prefix}*")

    if cli_overrides:
        layers.append(_apply_cli_overrides(cli_overrides))
        sources.append("cli")

    merged = _merge_many(layers)
    resolved = _resolve_refs(merged, merged)
    _validate(resolved)

    schema_version = str(resolved.get("config_schema_version", "unknown"))
    return ResolvedConfig(
        resolved=resolved,
        sources=sources,
        fingerprint=compute_fingerprint(resolved),
        schema_version=schema_version,
    )


__all__ = ["ResolvedConfig", "load_config"]
