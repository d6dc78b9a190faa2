"""
Verification image generation.

A short token is drawn onto a background image. Only its md5 digest is kept
server side (session, with a cookie as fallback), and the contact form
compares the digest of what the visitor typed.
"""

import hashlib
import io
import logging
import random
from pathlib import Path
from typing import Optional, Sequence, Tuple

from PIL import Image, ImageDraw, ImageFont

logger = logging.getLogger(__name__)

MAX_SEED = 9999
MAX_OFFSET = 24


def md5_hex(text: str) -> str:
    return hashlib.md5(text.encode("utf-8")).hexdigest()


def generate_token(length: int = 5, rng: Optional[random.Random] = None) -> Tuple[str, str]:
    """
    Pick a token and its digest.

    The token is a `length`-character slice of md5(seed) at a random offset,
    with seed in [0, 9999] and offset in [0, 24].

    Returns:
        (token, md5 hex digest of token)
    """
    rng = rng or random.Random()
    seed = rng.randint(0, MAX_SEED)
    offset = rng.randint(0, MAX_OFFSET)
    token = md5_hex(str(seed))[offset:offset + length]
    return token, md5_hex(token)


def render_token(
    token: str,
    background: Optional[Path] = None,
    size: Tuple[int, int] = (120, 40),
    colour: Sequence[int] = (130, 130, 130)
) -> bytes:
    """
    Draw `token` centred on a background and encode as PNG.

    Args:
        token: Text to draw
        background: PNG to draw on; a plain white image of `size` if None
        size: Fallback background size
        colour: RGB text colour

    Returns:
        PNG bytes
    """
    if background is not None:
        with Image.open(background) as src:
            image = src.convert("RGB")
    else:
        image = Image.new("RGB", tuple(size), (255, 255, 255))

    draw = ImageDraw.Draw(image)
    font = ImageFont.load_default()
    left, top, right, bottom = draw.textbbox((0, 0), token, font=font)
    x = round(image.width / 2 - (right - left) / 2)
    y = round(image.height / 2 - (bottom - top) / 2)
    draw.text((x, y), token, fill=tuple(colour), font=font)

    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()


def pick_background(backgrounds: Sequence[Path], rng: Optional[random.Random] = None) -> Optional[Path]:
    """Random background from the configured list, skipping missing files."""
    rng = rng or random.Random()
    existing = [Path(p) for p in backgrounds if Path(p).exists()]
    if len(existing) < len(backgrounds):
        logger.warning(f"{len(backgrounds) - len(existing)} captcha backgrounds missing")
    if not existing:
        return None
    return rng.choice(existing)
