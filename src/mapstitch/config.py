import os

from .version import __version__

STATICMAP_URL = os.environ.get(
    "MAPSTITCH_STATICMAP_URL",
    "https://maps.googleapis.com/maps/api/staticmap",
)
APP_VERSION = os.environ.get("APP_VERSION", __version__)
USER_AGENT = f"mapstitch/{APP_VERSION}"
API_KEY_ENV = "MAPSTITCH_API_KEY"
DEFAULT_CONCURRENCY = int(os.environ.get("MAPSTITCH_CONCURRENCY", "4"))
REQUEST_TIMEOUT = 30.0
CONNECT_TIMEOUT = 20.0

# Provider limits for a single static map request (unscaled pixels).
MAX_REQ_WIDTH = 640
MAX_REQ_HEIGHT = 640
# Attribution band at the bottom of every returned tile.
FOOTER_HEIGHT = 20
# Pixel size of the whole world at zoom 0.
TILE_SIZE = 256

DEFAULT_OUTFILE = "map.png"
