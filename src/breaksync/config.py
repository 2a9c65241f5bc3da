"""Typed configuration loader for reconciliation jobs."""
from __future__ import annotations

from pathlib import Path
from typing import List, Literal

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from .env import resolve_config_path


class RuptureConfig(BaseModel):
    name: str
    width: int | None = Field(None, ge=0, description="Leading characters compared; whole key when unset")


class KeyFieldConfig(BaseModel):
    field: str
    width: int | None = Field(None, ge=1)
    kind: Literal["text", "int"] = "text"

    @model_validator(mode="after")
    def _int_needs_width(self):
        if self.kind == "int" and self.width is None:
            raise ValueError(f"Integer key field '{self.field}' requires a width")
        return self


def _parse_key_item(item: str) -> dict:
    """Turn a `field` or `field:width` shorthand item into a key field."""
    name, _, width = item.strip().partition(":")
    if width.strip():
        return {"field": name.strip(), "width": width.strip()}
    return {"field": name.strip()}


class SourceConfig(BaseModel):
    name: str
    path: Path
    format: Literal["csv", "jsonl"] = "jsonl"
    key: List[KeyFieldConfig]
    rupture: str | None = None
    delimiter: str = ","

    @field_validator("key", mode="before")
    @classmethod
    def _split_key_fields(cls, value):
        if isinstance(value, str):
            return [_parse_key_item(item) for item in value.split(",") if item.strip()]
        return value

    @field_validator("key")
    @classmethod
    def _require_fixed_width_prefix(cls, value):
        if not value:
            raise ValueError("At least one key field is required")
        # Only the trailing field may vary in length without breaking sort order.
        for key_field in value[:-1]:
            if key_field.width is None:
                raise ValueError(
                    f"Key field '{key_field.field}' needs a width; only the last field may be unbounded"
                )
        return value


class JobConfig(BaseModel):
    name: str = "breaksync"
    check_order: bool = False
    ruptures: List[RuptureConfig] = Field(default_factory=list)
    sources: List[SourceConfig]

    @model_validator(mode="after")
    def _check_references(self):
        names = [source.name for source in self.sources]
        duplicates = sorted({name for name in names if names.count(name) > 1})
        if duplicates:
            raise ValueError(f"Duplicate source names: {', '.join(duplicates)}")
        declared = [rupture.name for rupture in self.ruptures]
        if len(set(declared)) != len(declared):
            raise ValueError("Rupture names must be unique")
        for source in self.sources:
            if source.rupture and source.rupture not in declared:
                raise ValueError(
                    f"Source '{source.name}' references unknown rupture '{source.rupture}'"
                )
        return self

    def resolve_paths(self, base: Path) -> "JobConfig":
        """Return a copy with relative source paths anchored at ``base``."""
        sources = [
            source if source.path.is_absolute() else source.model_copy(update={"path": base / source.path})
            for source in self.sources
        ]
        return self.model_copy(update={"sources": sources})


class ConfigLoader:
    """Loads a YAML job description and validates it with Pydantic."""

    def __init__(self, path: str | Path | None = None) -> None:
        self.config_path = resolve_config_path(path)
        if not self.config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {self.config_path}")
        self.model = self._parse_yaml()

    def _parse_yaml(self) -> JobConfig:
        raw: dict
        with self.config_path.open("r", encoding="utf-8") as fp:
            raw = yaml.safe_load(fp) or {}
        try:
            model = JobConfig(**raw)
        except ValidationError as exc:
            raise ValueError(f"Invalid configuration: {exc}") from exc
        return model.resolve_paths(self.config_path.parent)

    def get_source(self, name: str) -> SourceConfig:
        for source in self.model.sources:
            if source.name == name:
                return source
        raise KeyError(f"Source definition '{name}' not found in configuration")


__all__ = [
    "ConfigLoader",
    "JobConfig",
    "KeyFieldConfig",
    "RuptureConfig",
    "SourceConfig",
]
