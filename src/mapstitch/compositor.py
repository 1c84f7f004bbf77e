import logging
from pathlib import Path
from typing import Iterable, Tuple

from PIL import Image

from .errors import CompositeError, OutputError
from .models import DEFAULT_CONSTRAINTS, RelPixelCoord, TileConstraints, Viewport

logger = logging.getLogger(__name__)

# Formats Pillow can't write with an alpha channel.
_OPAQUE_SUFFIXES = {".jpg", ".jpeg", ".bmp"}


def new_canvas(viewport: Viewport) -> Image.Image:
    return Image.new("RGBA", viewport.canvas_size)


def composite(
    canvas: Image.Image,
    pairs: Iterable[Tuple[Image.Image, RelPixelCoord]],
    constraints: TileConstraints = DEFAULT_CONSTRAINTS,
    scale: int = 1,
) -> None:
    """
    Paste every tile into ``canvas`` at its planned top left corner.

    The bottom ``footer_height`` rows of each tile are dropped. Regions past
    the canvas edge are clipped; where tiles overlap the later one wins.
    """
    expected = constraints.tile_size(scale)
    for index, (tile, top_left) in enumerate(pairs):
        if tile.size != expected:
            raise CompositeError(
                "ERR_COMPOSITE_TILE_SIZE",
                (
                    f"Tile {index} is {tile.size[0]}x{tile.size[1]} px, "
                    f"expected {expected[0]}x{expected[1]} px"
                ),
            )
        width, height = tile.size
        region = tile.crop((0, 0, width, height - constraints.footer_height))
        if region.mode != canvas.mode:
            region = region.convert(canvas.mode)
        canvas.paste(region, (int(top_left.x), int(top_left.y)))


def save_image(canvas: Image.Image, out_path: Path) -> Path:
    out_path = Path(out_path)
    image = canvas
    if out_path.suffix.lower() in _OPAQUE_SUFFIXES:
        image = canvas.convert("RGB")
    try:
        image.save(out_path)
    except (OSError, ValueError) as exc:
        raise OutputError("ERR_OUTPUT_WRITE", f"{out_path}: {exc}") from exc
    logger.info("Saved %dx%d map to %s", canvas.width, canvas.height, out_path)
    return out_path
