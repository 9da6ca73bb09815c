from __future__ import annotations

from pathlib import Path

import yaml
from expandvars import expandvars
from pydantic import BaseModel, ConfigDict, Field, field_validator


class TesterConfig(BaseModel):
    """Display and export options, fixed once the tester is built."""

    __test__ = False

    model_config = ConfigDict(frozen=True, extra="forbid")

    pass_text: str = "PASS"
    fail_text: str = "FAIL"
    pad: int = Field(default=80, ge=1)
    save: str | None = None
    includes: list[str] = []

    @field_validator("pass_text", "fail_text")
    @classmethod
    def label_must_not_be_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("label must not be blank")
        return v


def _resolve(value: str, base_dir: Path) -> str:
    path = Path(expandvars(value))
    if not path.is_absolute():
        path = base_dir / path
    return str(path.resolve())


def load_config(path: Path) -> TesterConfig:
    """Load a tester config from YAML, resolving paths against its directory."""
    config_dir = path.parent.resolve()

    with open(path) as f:
        raw = yaml.safe_load(f) or {}
    if not isinstance(raw, dict):
        raise ValueError(f"{path}: config must be a mapping")

    if raw.get("save"):
        raw["save"] = _resolve(raw["save"], config_dir)
    raw["includes"] = [_resolve(p, config_dir) for p in raw.get("includes") or []]

    return TesterConfig(**raw)
