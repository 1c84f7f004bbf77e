import asyncio
import logging
from io import BytesIO
from typing import List, Sequence

import httpx
from PIL import Image, UnidentifiedImageError

from ..config import (
    CONNECT_TIMEOUT,
    DEFAULT_CONCURRENCY,
    REQUEST_TIMEOUT,
    STATICMAP_URL,
    USER_AGENT,
)
from ..errors import FetchError
from .query import QueryParams

logger = logging.getLogger(__name__)


def http_limits(concurrency: int) -> httpx.Limits:
    # A pool of zero connections never hands one out.
    concurrency = max(1, concurrency)
    return httpx.Limits(
        max_connections=concurrency,
        max_keepalive_connections=concurrency,
    )


def build_http_client(
    concurrency: int = DEFAULT_CONCURRENCY,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    timeout = httpx.Timeout(REQUEST_TIMEOUT, connect=CONNECT_TIMEOUT)
    limits = http_limits(concurrency)
    return httpx.AsyncClient(
        headers={"User-Agent": USER_AGENT},
        timeout=timeout,
        limits=limits,
        transport=transport,
    )


async def fetch_tile(
    client: httpx.AsyncClient,
    params: QueryParams,
    url: str = STATICMAP_URL,
) -> Image.Image:
    try:
        resp = await client.get(url, params=params)
    except httpx.HTTPError as exc:
        raise FetchError("ERR_FETCH_TRANSPORT", str(exc)) from exc

    if resp.status_code != 200:
        raise FetchError("ERR_FETCH_STATUS", f"HTTP {resp.status_code}")

    try:
        img = Image.open(BytesIO(resp.content))
        img.load()
    except (UnidentifiedImageError, OSError) as exc:
        raise FetchError("ERR_FETCH_DECODE", f"Cannot decode tile: {exc}") from exc
    return img.convert("RGBA")


async def fetch_tiles(
    client: httpx.AsyncClient,
    queries: Sequence[QueryParams],
    concurrency: int = DEFAULT_CONCURRENCY,
    url: str = STATICMAP_URL,
) -> List[Image.Image]:
    """
    Fetch all tiles concurrently and return them in query order.

    Waits for every tile. On the first failure the remaining downloads
    are cancelled and a single FetchError is raised.
    """
    total = len(queries)
    sem = asyncio.Semaphore(max(1, concurrency))
    results: List[Image.Image | None] = [None] * total

    async def bounded_fetch(index: int, params: QueryParams):
        async with sem:
            return index, await fetch_tile(client, params, url)

    tasks = [
        asyncio.create_task(bounded_fetch(idx, params))
        for idx, params in enumerate(queries)
    ]

    done = 0
    try:
        for coro in asyncio.as_completed(tasks):
            index, img = await coro
            results[index] = img
            done += 1
            logger.debug("Fetched tile %d (%d/%d)", index, done, total)
    except asyncio.CancelledError:
        await _cancel_all(tasks)
        raise
    except FetchError:
        await _cancel_all(tasks)
        raise
    except Exception as exc:  # noqa: BLE001
        await _cancel_all(tasks)
        raise FetchError("ERR_FETCH_FAILED", str(exc)) from exc

    return results


async def _cancel_all(tasks: Sequence[asyncio.Task]) -> None:
    for task in tasks:
        task.cancel()
    await asyncio.gather(*tasks, return_exceptions=True)
