"""
Web Mercator transforms and the request grid planner.

Frames, from the globe down to the output image:
- GeoCoord: latitude / longitude in degrees;
- WorldCoord: zoom invariant, the whole world spans TILE_SIZE units;
- AbsPixelCoord: world scaled by 2**zoom;
- RelPixelCoord: pixels relative to the top left of the output canvas.
"""
from __future__ import annotations

import logging
import math
from typing import Iterator, List

from .config import TILE_SIZE
from .errors import PlanningError
from .models import (
    DEFAULT_CONSTRAINTS,
    AbsPixelCoord,
    GeoCoord,
    RelPixelCoord,
    SubRequest,
    TileConstraints,
    Viewport,
    WorldCoord,
)

logger = logging.getLogger(__name__)

# Caps latitude at about 89.189 degrees, a third of a tile past the world edge.
MAX_SIN_LAT = 0.9999


def geo_to_world(geo: GeoCoord) -> WorldCoord:
    siny = math.sin(geo.lat * math.pi / 180)
    siny = min(max(siny, -MAX_SIN_LAT), MAX_SIN_LAT)
    return WorldCoord(
        x=TILE_SIZE * (0.5 + geo.lng / 360),
        y=TILE_SIZE * (0.5 - math.log((1 + siny) / (1 - siny)) / (4 * math.pi)),
    )


def world_to_abs_pixel(world: WorldCoord, zoom: int) -> AbsPixelCoord:
    factor = 2**zoom
    return AbsPixelCoord(x=world.x * factor, y=world.y * factor)


def abs_pixel_to_world(px: AbsPixelCoord, zoom: int) -> WorldCoord:
    factor = 2**zoom
    return WorldCoord(x=px.x / factor, y=px.y / factor)


def world_to_geo(world: WorldCoord) -> GeoCoord:
    lng = 360 * (world.x / TILE_SIZE - 0.5)
    lat = (
        -180
        * math.asin(1 - 2 / (1 + math.exp(4 * math.pi * (world.y / TILE_SIZE - 0.5))))
        / math.pi
    )
    return GeoCoord(lat=lat, lng=lng)


def rel_to_abs_pixel(rel: RelPixelCoord, viewport: Viewport) -> AbsPixelCoord:
    """
    Output canvas pixel -> absolute pixel.

    Offsets are taken from the viewport center, so every request shares
    the same reference point.
    """
    center = world_to_abs_pixel(geo_to_world(viewport.center), viewport.zoom)
    dx = rel.x / viewport.scale - viewport.width / 2
    dy = rel.y / viewport.scale - viewport.height / 2
    return AbsPixelCoord(x=center.x + dx, y=center.y + dy)


def rel_pixel_to_geo(rel: RelPixelCoord, viewport: Viewport) -> GeoCoord:
    absolute = rel_to_abs_pixel(rel, viewport)
    return world_to_geo(abs_pixel_to_world(absolute, viewport.zoom))


def _validate(viewport: Viewport, constraints: TileConstraints) -> None:
    for name in ("width", "height", "scale"):
        value = getattr(viewport, name)
        if value <= 0:
            raise PlanningError(
                "ERR_PLAN_DIMENSION",
                f"{name} must be positive, got {value}",
            )
    if viewport.zoom < 0:
        raise PlanningError(
            "ERR_PLAN_ZOOM", f"zoom must not be negative, got {viewport.zoom}"
        )
    if constraints.max_width <= 0 or constraints.max_height <= 0:
        raise PlanningError(
            "ERR_PLAN_TILE_SIZE",
            f"Invalid tile size {constraints.max_width}x{constraints.max_height}",
        )
    if not 0 <= constraints.footer_height < constraints.max_height * viewport.scale:
        raise PlanningError(
            "ERR_PLAN_FOOTER",
            f"Footer of {constraints.footer_height}px leaves no usable tile area",
        )


def iter_requests(
    viewport: Viewport, constraints: TileConstraints = DEFAULT_CONSTRAINTS
) -> Iterator[SubRequest]:
    """
    Raster scan of the output canvas, columns outer, rows inner.

    Rows advance by the tile height minus the footer, so each tile covers
    the band trimmed from the tile above it. The last row and column may
    run past the canvas edge.
    """
    _validate(viewport, constraints)

    canvas_w, canvas_h = viewport.canvas_size
    tile_w, tile_h = constraints.tile_size(viewport.scale)
    step_x = tile_w
    step_y = tile_h - constraints.footer_height

    x = 0
    while x < canvas_w:
        center_x = x + tile_w / 2
        y = 0
        while y < canvas_h:
            center_y = y + tile_h / 2
            center = rel_pixel_to_geo(RelPixelCoord(x=center_x, y=center_y), viewport)
            yield SubRequest(center=center, top_left=RelPixelCoord(x=x, y=y))
            y += step_y
        x += step_x


def compute_requests(
    viewport: Viewport, constraints: TileConstraints = DEFAULT_CONSTRAINTS
) -> List[SubRequest]:
    requests = list(iter_requests(viewport, constraints))
    logger.debug(
        "Planned %d requests for %dx%d canvas",
        len(requests),
        *viewport.canvas_size,
    )
    return requests
