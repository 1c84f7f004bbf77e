"""
Static map query parameters for one sub-request.

Overlay options (``style``, ``markers``, ``path``) are validated with
pydantic and serialized into the provider's ``key:value|...`` syntax.
Every other option is passed through unchanged.
"""
from __future__ import annotations

import re
from typing import Any, Callable, List, Literal, Optional, Sequence, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError, field_validator

from ..config import MAX_REQ_HEIGHT, MAX_REQ_WIDTH
from ..errors import QueryError
from ..models import GeoCoord, MapConfig

QueryParams = List[Tuple[str, str]]

_LABEL_RE = re.compile(r"^[A-Z0-9]$")

Anchor = Literal[
    "top",
    "bottom",
    "left",
    "right",
    "center",
    "topleft",
    "topright",
    "bottomleft",
    "bottomright",
]


class Coordinate(BaseModel):
    lat: float
    lng: float

    model_config = ConfigDict(extra="forbid")


# Either a coordinate or a free text address.
Location = Union[Coordinate, str]


class StyleComponent(BaseModel):
    feature_type: Optional[str] = Field(default=None, alias="featureType")
    element_type: Optional[str] = Field(default=None, alias="elementType")
    stylers: List[dict]


class IconMarkerStyle(BaseModel):
    icon: str
    anchor: Optional[Anchor] = None

    model_config = ConfigDict(extra="forbid")


class PlainMarkerStyle(BaseModel):
    size: Optional[Literal["tiny", "mid", "small"]] = None
    color: Optional[str] = None
    label: Optional[str] = None

    model_config = ConfigDict(extra="forbid")

    @field_validator("label")
    @classmethod
    def validate_label(cls, label: Optional[str]) -> Optional[str]:
        if label is not None and not _LABEL_RE.match(label):
            raise ValueError("Marker label must be a single upper-case letter or digit")
        return label


class MarkerDef(BaseModel):
    style: Optional[Union[IconMarkerStyle, PlainMarkerStyle]] = None
    locations: List[Location]


class PathDef(BaseModel):
    weight: Optional[float] = None
    color: Optional[str] = None
    fillcolor: Optional[str] = None
    geodesic: Optional[bool] = None
    locations: List[Location]


def _location(location: Location) -> str:
    if isinstance(location, Coordinate):
        return f"{location.lat},{location.lng}"
    return location


def _kvp(key: str, value: Any) -> str:
    return f"{key}:{value}"


def _number(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else str(value)


def _scalar(value: Any) -> str:
    """Render a JSON scalar the way it reads in the config file."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        return _number(value)
    return str(value)


def serialize_style(comp: StyleComponent) -> str:
    parts: List[str] = []
    if comp.feature_type:
        parts.append(_kvp("feature", comp.feature_type))
    if comp.element_type:
        parts.append(_kvp("element", comp.element_type))
    for styler in comp.stylers:
        parts.extend(_kvp(key, _scalar(value)) for key, value in styler.items())
    return "|".join(parts)


def serialize_marker(marker: MarkerDef) -> str:
    parts: List[str] = []
    style = marker.style
    if isinstance(style, IconMarkerStyle):
        parts.append(_kvp("icon", style.icon))
        if style.anchor:
            parts.append(_kvp("anchor", style.anchor))
    elif isinstance(style, PlainMarkerStyle):
        if style.size:
            parts.append(_kvp("size", style.size))
        if style.color:
            parts.append(_kvp("color", style.color))
        if style.label:
            parts.append(_kvp("label", style.label))
    parts.extend(_location(loc) for loc in marker.locations)
    return "|".join(parts)


def serialize_path(path: PathDef) -> str:
    parts: List[str] = []
    if path.weight is not None:
        parts.append(_kvp("weight", _number(path.weight)))
    if path.color:
        parts.append(_kvp("color", path.color))
    if path.fillcolor:
        parts.append(_kvp("fillcolor", path.fillcolor))
    if path.geodesic is not None:
        parts.append(_kvp("geodesic", _scalar(path.geodesic)))
    parts.extend(_location(loc) for loc in path.locations)
    return "|".join(parts)


def _sanitize(value: str) -> str:
    # The provider expects hex colors as 0xRRGGBB.
    return value.replace("color:#", "color:0x")


def _build_params(
    name: str,
    data: Any,
    model: type,
    serializer: Callable[[Any], str],
) -> QueryParams:
    try:
        items = TypeAdapter(List[model]).validate_python(data)
    except ValidationError as exc:
        raise QueryError("ERR_QUERY_MALFORMED", f"Malformed {name}: {exc}") from exc
    return [(name, _sanitize(serializer(item))) for item in items]


_OVERLAYS = {
    "style": (StyleComponent, serialize_style),
    "markers": (MarkerDef, serialize_marker),
    "path": (PathDef, serialize_path),
}


def build_overlay_params(options: dict) -> QueryParams:
    params: QueryParams = []
    for key, value in options.items():
        overlay = _OVERLAYS.get(key)
        if overlay is not None:
            model, serializer = overlay
            params.extend(_build_params(key, value, model, serializer))
        else:
            params.append((key, _scalar(value)))
    return params


def build_query(
    point: GeoCoord,
    config: MapConfig,
    size: Sequence[int] = (MAX_REQ_WIDTH, MAX_REQ_HEIGHT),
) -> QueryParams:
    """Query parameters for one tile centered on ``point``.

    The full provider size is always requested; trimming happens when
    the tiles are composited.
    """
    params: QueryParams = [
        ("center", f"{point.lat:.6f},{point.lng:.6f}"),
        ("zoom", str(config.zoom)),
        ("scale", str(config.scale)),
        ("size", f"{size[0]}x{size[1]}"),
    ]
    params.extend(build_overlay_params(config.options))
    return params
