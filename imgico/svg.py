"""Wrap a PNG in an SVG document as a base64 data URI."""

import base64

SVG_TEMPLATE = (
    '<svg width="{width}" height="{height}" '
    'xmlns="http://www.w3.org/2000/svg" '
    'xmlns:xlink="http://www.w3.org/1999/xlink">\n'
    '  <image width="{width}" height="{height}" '
    'xlink:href="data:image/png;base64,{payload}" />\n'
    '</svg>'
)


def wrap_svg(png_bytes: bytes, width: int, height: int) -> bytes:
    """Return a UTF-8 SVG whose single <image> embeds png_bytes."""
    payload = base64.b64encode(png_bytes).decode("ascii")
    svg = SVG_TEMPLATE.format(width=width, height=height, payload=payload)
    return svg.encode("utf-8")
