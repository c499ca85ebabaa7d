"""Deterministic identicon avatars.

The image depends only on the seed bytes: the MD5 digest picks the
foreground colour and which cells of a horizontally mirrored grid are filled.
PNG encoding carries no timestamps, so the output bytes are reproducible.
"""

import hashlib
import io

from PIL import Image, ImageDraw

AVATAR_RESOLUTION = 60
AVATAR_BLOCK_SIZE = 12


def _foreground(digest: bytes) -> tuple[int, int, int, int]:
    # Keep colours away from white so they stay visible
    r, g, b = (64 + digest[i] % 160 for i in range(3))
    return (r, g, b, 255)


def _cells(digest: bytes, blocks: int) -> list[tuple[int, int]]:
    """Filled (column, row) cells, mirrored around the vertical axis."""
    half = (blocks + 1) // 2
    bits = int.from_bytes(digest, "big")
    filled = []
    index = 0
    for row in range(blocks):
        for col in range(half):
            if (bits >> index) & 1:
                filled.append((col, row))
                mirror = blocks - 1 - col
                if mirror != col:
                    filled.append((mirror, row))
            index += 1
    return filled


def identicon(
    seed: bytes,
    size: int = AVATAR_RESOLUTION,
    block_size: int = AVATAR_BLOCK_SIZE,
) -> bytes:
    """Render an identicon for a seed and encode it as PNG.

    Args:
        seed: Raw bytes identifying the owner (the feed name)
        size: Width and height of the image in pixels
        block_size: Edge length of a grid cell in pixels

    Returns:
        PNG bytes
    """
    if block_size <= 0 or size < block_size:
        raise ValueError(f"Invalid identicon geometry: size={size}, block_size={block_size}")

    digest = hashlib.md5(seed).digest()
    blocks = size // block_size
    offset = (size - blocks * block_size) // 2

    image = Image.new("RGBA", (size, size), (0, 0, 0, 0))
    draw = ImageDraw.Draw(image)
    color = _foreground(digest)

    for col, row in _cells(digest[3:], blocks):
        x0 = offset + col * block_size
        y0 = offset + row * block_size
        draw.rectangle((x0, y0, x0 + block_size - 1, y0 + block_size - 1), fill=color)

    buf = io.BytesIO()
    image.save(buf, format="PNG")
    return buf.getvalue()
