"""Pydantic models shared between the engine and its collaborators."""

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict

from .charsets import Charset

ArcStyle = Literal["curved", "straight", "off"]


class AttackMarker(BaseModel):
    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    latitude: float
    longitude: float
    valid: bool = True
    protocol: Optional[str] = None


class AttackArc(BaseModel):
    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    src_lat: float
    src_lon: float
    dst_lat: float
    dst_lon: float
    created_at: float
    ttl: float
    protocol: Optional[str] = None

    def age(self, now: float) -> float:
        return now - self.created_at


class LightingConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    enabled: bool = False
    lon: float = 0.0
    lat: float = 0.0
    follow: bool = False


class RenderParams(BaseModel):
    """Per-frame render settings, built by the frame loop and passed in.

    Zoom and pan travel with the SphereState, not here.
    """

    model_config = ConfigDict(frozen=True)

    rotation: float = 0.0
    lighting: LightingConfig = LightingConfig()
    charset: Charset = Charset.ASCII
    arc_style: ArcStyle = "curved"
    protocol_glyphs: bool = False
