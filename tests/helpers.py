from io import BytesIO

from PIL import Image

FOOTER_COLOR = (255, 0, 0, 255)


def make_tile(size, color, footer_height=0):
    """Solid tile whose bottom ``footer_height`` rows are painted FOOTER_COLOR."""
    tile = Image.new("RGBA", size, color)
    if footer_height:
        footer = Image.new("RGBA", (size[0], footer_height), FOOTER_COLOR)
        tile.paste(footer, (0, size[1] - footer_height))
    return tile


def png_bytes(image):
    buf = BytesIO()
    image.save(buf, format="PNG")
    return buf.getvalue()
