import io
import logging

import pytest
from PIL import Image

from repositorium.core.errors import ConversionError
from repositorium.infrastructure.media.image_export import (
    ScaleMode,
    Size,
    convert_image,
    expand_over_bounds,
    keep_within_bounds,
    output_format,
)


def _png(width: int, height: int) -> bytes:
    out = io.BytesIO()
    Image.new("RGBA", (width, height), (0, 128, 255, 255)).save(out, format="PNG")
    return out.getvalue()


def test_keep_within_bounds() -> None:
    assert keep_within_bounds(Size(100, 120), Size(100, 100)) == Size(83, 100)
    assert keep_within_bounds(Size(400, 200), Size(100, 100)) == Size(100, 50)
    assert keep_within_bounds(Size(50, 40), Size(100, 100)) == Size(50, 40)


def test_expand_over_bounds_matches_closest_axis() -> None:
    assert expand_over_bounds(Size(400, 200), Size(100, 100)) == Size(200, 100)
    assert expand_over_bounds(Size(50, 10), Size(100, 100)) == Size(100, 20)


def test_output_format() -> None:
    assert output_format(".jpg") == "JPEG"
    assert output_format(".JPEG") == "JPEG"
    assert output_format(".png") == "PNG"
    with pytest.raises(ConversionError):
        output_format(".gif")
    with pytest.raises(ConversionError):
        output_format("")


@pytest.mark.parametrize(
    ("mode", "expected"),
    [
        (ScaleMode.KEEP_WITHIN_BOUNDS, (100, 50)),
        (ScaleMode.EXPAND_OVER_BOUNDS, (200, 100)),
        (ScaleMode.COVER, (100, 100)),
    ],
)
def test_convert_image_sizes(mode: ScaleMode, expected: tuple[int, int]) -> None:
    data = convert_image(_png(400, 200), ".jpg", Size(100, 100), mode)
    with Image.open(io.BytesIO(data)) as img:
        assert img.format == "JPEG"
        assert img.size == expected


def test_convert_image_to_png_keeps_alpha() -> None:
    data = convert_image(_png(400, 400), ".png", Size(100, 100))
    with Image.open(io.BytesIO(data)) as img:
        assert img.format == "PNG"
        assert img.mode == "RGBA"
        assert img.size == (100, 100)


def test_small_images_log_a_warning(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING):
        convert_image(_png(10, 10), ".jpg", Size(100, 100))
    assert "very small image" in caplog.text


def test_undecodable_image_is_rejected() -> None:
    with pytest.raises(ConversionError):
        convert_image(b"not an image", ".jpg", Size(100, 100))
