import logging
import time
from pathlib import Path

import httpx

from ..compositor import composite, new_canvas, save_image
from ..config import DEFAULT_CONCURRENCY, STATICMAP_URL
from ..errors import MapStitchError
from ..geography import compute_requests
from ..models import DEFAULT_CONSTRAINTS, MapConfig, TileConstraints
from ..settings import load_config
from .query import build_query
from .tiles import build_http_client, fetch_tiles

logger = logging.getLogger(__name__)


async def download_map(
    config: MapConfig,
    out_path: Path,
    concurrency: int = DEFAULT_CONCURRENCY,
    constraints: TileConstraints = DEFAULT_CONSTRAINTS,
    transport: httpx.AsyncBaseTransport | None = None,
    url: str = STATICMAP_URL,
) -> Path:
    """Plan, fetch and stitch the map described by ``config`` into ``out_path``."""
    started = time.monotonic()
    concurrency = max(1, concurrency)

    requests = compute_requests(config, constraints)
    size = (constraints.max_width, constraints.max_height)
    queries = [build_query(req.center, config, size) for req in requests]
    logger.info(
        "Fetching %d tiles for a %dx%d map", len(queries), *config.canvas_size
    )

    async with build_http_client(concurrency, transport=transport) as client:
        tiles = await fetch_tiles(client, queries, concurrency=concurrency, url=url)

    canvas = new_canvas(config)
    composite(
        canvas,
        zip(tiles, (req.top_left for req in requests)),
        constraints,
        scale=config.scale,
    )
    result = save_image(canvas, out_path)
    logger.info("Done in %.2f s", time.monotonic() - started)
    return result


async def run(
    config_path: Path,
    out_path: Path,
    concurrency: int = DEFAULT_CONCURRENCY,
) -> int:
    """Run the whole pipeline and return a process exit code."""
    try:
        config = load_config(config_path)
        await download_map(config, out_path, concurrency=concurrency)
    except MapStitchError as exc:
        logger.error("%s failed: %s", type(exc).__name__, exc)
        return exc.exit_code
    return 0
