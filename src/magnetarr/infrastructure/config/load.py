from __future__ import annotations

from copy import deepcopy
from functools import cache
from pathlib import Path
from typing import Any, Mapping

import yaml
from dotenv import load_dotenv
from pydantic import AliasChoices, AliasPath

from .defaults import DEFAULT_CONFIG
from .schema import AppConfig, EnvOverrides


@cache
def _flat_map() -> dict[str, tuple[str, str]]:
    """Flat field name -> (section, key), read off AppConfig's aliases."""
    mapping: dict[str, tuple[str, str]] = {}
    for name, field in AppConfig.model_fields.items():
        alias = field.validation_alias
        if not isinstance(alias, AliasChoices):
            continue
        for choice in alias.choices:
            if isinstance(choice, AliasPath) and len(choice.path) == 2:
                section, key = choice.path
                mapping[name] = (str(section), str(key))
    return mapping


def _deep_merge(base: dict[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    """Merge *override* into *base* in place; nested mappings merge, anything else replaces."""
    for key, value in override.items():
        current = base.get(key)
        if isinstance(current, dict) and isinstance(value, Mapping):
            _deep_merge(current, value)
        else:
            base[key] = value
    return base


def _normalize_layer(data: Mapping[str, Any]) -> dict[str, Any]:
    """
    Bring one layer (defaults/YAML/ENV/CLI) into the sectioned shape.

    Sectioned blocks (``search: {base_url: ...}``) pass through; flat keys
    (``search_base_url``) are moved into their section. Top-level scalars
    without a section (``app_name``, ``environment``) are kept as-is.
    """
    flat_map = _flat_map()
    sections = {section for section, _ in flat_map.values()}
    out: dict[str, Any] = {}

    for key, value in data.items():
        if key in sections and isinstance(value, Mapping):
            out.setdefault(key, {}).update(value)
        elif key in flat_map:
            section, section_key = flat_map[key]
            out.setdefault(section, {})[section_key] = value
        elif key in AppConfig.model_fields:
            out[key] = value

    return out


def _read_yaml_config(config_path: Path) -> dict[str, Any]:
    if not config_path.exists():
        raise FileNotFoundError(config_path)
    parsed = yaml.safe_load(config_path.read_text(encoding="utf-8"))
    if parsed is None:
        return {}
    if not isinstance(parsed, dict):
        raise ValueError(f"Config YAML must be a mapping, got: {type(parsed)!r}")
    return parsed


def load_config(
    *,
    config_path: Path | None = None,
    dotenv_path: Path | None = None,
    cli_overrides: dict[str, Any] | None = None,
) -> AppConfig:
    """
    Load configuration with strict precedence:
    defaults < YAML file < env vars (incl. .env) < cli overrides

    No filesystem side-effects; a missing YAML or .env path is an error.
    """
    # .env feeds os.environ, so it lands in the env layer; real env vars win.
    if dotenv_path is not None:
        if not dotenv_path.exists():
            raise FileNotFoundError(dotenv_path)
        load_dotenv(dotenv_path, override=False)

    layers: list[Mapping[str, Any]] = [deepcopy(DEFAULT_CONFIG)]
    if config_path is not None:
        layers.append(_read_yaml_config(config_path))
    layers.append(EnvOverrides().to_update_dict())
    layers.append(cli_overrides or {})

    merged: dict[str, Any] = {}
    for layer in layers:
        _deep_merge(merged, _normalize_layer(layer))

    return AppConfig.model_validate(merged)
