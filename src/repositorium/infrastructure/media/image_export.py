from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from enum import Enum

from PIL import Image, ImageOps, UnidentifiedImageError

from repositorium.core.errors import ConversionError

logger = logging.getLogger(__name__)

SMALL_IMAGE_WARNING = 300
JPEG_QUALITY = 75

_FORMATS = {".jpg": "JPEG", ".jpeg": "JPEG", ".png": "PNG"}


class ScaleMode(str, Enum):
    KEEP_WITHIN_BOUNDS = "keep_within_bounds"
    EXPAND_OVER_BOUNDS = "expand_over_bounds"
    COVER = "cover"


@dataclass(frozen=True, slots=True)
class Size:
    width: float
    height: float


def expand_over_bounds(size: Size, preferred: Size) -> Size:
    """Scale ``size`` so the axis closest to ``preferred`` matches it exactly."""
    x_diff = abs(size.width - preferred.width)
    y_diff = abs(size.height - preferred.height)
    if x_diff > y_diff:
        scale = preferred.height / size.height
    else:
        scale = preferred.width / size.width
    return Size(width=size.width * scale, height=size.height * scale)


def keep_within_bounds(original: Size, preferred: Size) -> Size:
    """Shrink ``original`` until it fits inside ``preferred``. Never enlarges."""
    if original.width <= preferred.width and original.height <= preferred.height:
        return original

    width, height = original.width, original.height
    if width > preferred.width:
        scale = preferred.width / width
        width, height = preferred.width, round(height * scale)
    if height > preferred.height:
        scale = preferred.height / height
        width, height = round(width * scale), preferred.height
    return Size(width=width, height=height)


def target_size(original: Size, bounds: Size, mode: ScaleMode) -> Size:
    if mode is ScaleMode.KEEP_WITHIN_BOUNDS:
        return keep_within_bounds(original, bounds)
    return expand_over_bounds(original, bounds)


def output_format(suffix: str) -> str:
    fmt = _FORMATS.get(suffix.lower())
    if fmt is None:
        raise ConversionError(f"Images can only be exported as .jpg or .png, not {suffix or 'no extension'}")
    return fmt


def convert_image(data: bytes, suffix: str, bounds: Size, mode: ScaleMode = ScaleMode.KEEP_WITHIN_BOUNDS) -> bytes:
    """Decode ``data``, fit it to ``bounds`` and re-encode it for ``suffix``."""
    fmt = output_format(suffix)
    try:
        with Image.open(io.BytesIO(data)) as opened:
            img = ImageOps.exif_transpose(opened)
            img.load()
    except (UnidentifiedImageError, OSError) as exc:
        raise ConversionError(f"Failed decoding image: {exc}") from exc

    width, height = img.size
    if width < SMALL_IMAGE_WARNING or height < SMALL_IMAGE_WARNING:
        logger.warning("Exporting very small image. %dx%d", width, height)

    original = Size(width=width, height=height)
    target = target_size(original, bounds, mode)
    target_px = (max(1, round(target.width)), max(1, round(target.height)))
    if target_px != img.size:
        img = img.resize(target_px, Image.Resampling.LANCZOS)

    if mode is ScaleMode.COVER:
        img = _crop_to(img, bounds)

    out = io.BytesIO()
    if fmt == "JPEG":
        if img.mode not in ("RGB", "L"):
            img = img.convert("RGB")
        img.save(out, format=fmt, quality=JPEG_QUALITY)
    else:
        img.save(out, format=fmt)
    return out.getvalue()


def _crop_to(img: Image.Image, bounds: Size) -> Image.Image:
    width, height = img.size
    box_w = min(width, max(1, round(bounds.width)))
    box_h = min(height, max(1, round(bounds.height)))
    left = (width - box_w) // 2
    top = (height - box_h) // 2
    return img.crop((left, top, left + box_w, top + box_h))
