from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field

from .config import FOOTER_HEIGHT, MAX_REQ_HEIGHT, MAX_REQ_WIDTH


class GeoCoord(BaseModel):
    """A point on the globe, in degrees."""

    lat: float
    lng: float

    model_config = ConfigDict(frozen=True, extra="ignore")


class Viewport(BaseModel):
    """Geometry of the requested output image.

    ``width`` and ``height`` are unscaled pixels; the output canvas is
    ``scale * width`` by ``scale * height``.
    """

    width: int
    height: int
    zoom: int
    scale: int
    center: GeoCoord

    model_config = ConfigDict(frozen=True, extra="ignore")

    @property
    def canvas_size(self) -> tuple[int, int]:
        return self.width * self.scale, self.height * self.scale


class MapConfig(Viewport):
    options: Dict[str, Any] = Field(default_factory=dict)


# Pixel and world frames are kept as separate types so they can't be mixed up.


@dataclass(frozen=True)
class WorldCoord:
    """Zoom invariant projected coordinate, in units of the zoom 0 tile."""

    x: float
    y: float


@dataclass(frozen=True)
class AbsPixelCoord:
    """Pixel in the global pixel grid at a given zoom."""

    x: float
    y: float


@dataclass(frozen=True)
class RelPixelCoord:
    """Pixel relative to the top left corner of the output canvas."""

    x: float
    y: float


@dataclass(frozen=True)
class SubRequest:
    center: GeoCoord
    top_left: RelPixelCoord


@dataclass(frozen=True)
class TileConstraints:
    """Provider limits shared by the planner and the compositor."""

    max_width: int = MAX_REQ_WIDTH
    max_height: int = MAX_REQ_HEIGHT
    footer_height: int = FOOTER_HEIGHT

    def tile_size(self, scale: int) -> tuple[int, int]:
        """Size of a tile as returned by the provider at ``scale``."""
        return self.max_width * scale, self.max_height * scale


DEFAULT_CONSTRAINTS = TileConstraints()
