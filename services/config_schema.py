from __future__ import annotations

from typing import Annotated

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field


# ---------------------------------------------------------------------------
# Reusable bool coercion: "true" / "1" / "yes" → True
# ---------------------------------------------------------------------------

def _coerce_bool(v: object) -> object:
    if isinstance(v, str):
        return v.lower() in ("true", "1", "yes")
    return v


CoercedBool = Annotated[bool, BeforeValidator(_coerce_bool)]


# ---------------------------------------------------------------------------
# Bases: unknown keys inside a section are a validation error
# ---------------------------------------------------------------------------

class _Section(BaseModel):
    model_config = ConfigDict(extra="forbid")


class _DriverConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")


# ---------------------------------------------------------------------------
# Sections
# ---------------------------------------------------------------------------

class MediaConfig(_Section):
    temp_dir:      str   = ""                        # "" → <system tmp>/chirpterm
    open_interval: float = Field(default=0.001, ge=0)  # seconds between viewer launches


class StatusConfig(_Section):
    clear_after: float = Field(default=30.0, gt=0)   # seconds a message stays visible


class ViewerConfig(_Section):
    enabled: CoercedBool = True
    command: str         = ""                        # "" → xdg-open / open


# ---------------------------------------------------------------------------
# Top-level application config
# ---------------------------------------------------------------------------

class AppConfig(BaseModel):
    # Driver blocks (e.g. "rest") live at top level too and are validated
    # separately against the driver registry.
    model_config = ConfigDict(extra="ignore")

    media:  MediaConfig  = Field(default_factory=MediaConfig)
    status: StatusConfig = Field(default_factory=StatusConfig)
    viewer: ViewerConfig = Field(default_factory=ViewerConfig)
