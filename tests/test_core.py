"""
Tests for raster helpers, configs and mark asset building.

Run with: python -m pytest tests/test_core.py -v
"""

import dataclasses
import math
from types import SimpleNamespace

import numpy as np
import pytest
from PIL import Image

from conftest import solid_png, to_png, cairosvg_available

from labelmark.core.assets import (
    MarkAsset, build_placement_mark, build_tile_mark, load_asset, read_asset_bytes
)
from labelmark.core.config import PlacementConfig, TileConfig
from labelmark.core.errors import AssetError, DimensionError, WatermarkError
from labelmark.core.raster import (
    composite_over, decode_image, ensure_rgba, image_size, new_transparent,
    reduce_bit_depth, resize_to_width, rotate_clockwise, round_half_up, scale_alpha
)


def alpha_ramp_image(width: int = 256, height: int = 4) -> Image.Image:
    """RGBA image whose alpha runs 0..255 across each row."""
    arr = np.zeros((height, width, 4), dtype=np.uint8)
    arr[:, :, 0] = 10
    arr[:, :, 1] = 200
    arr[:, :, 2] = 30
    arr[:, :, 3] = np.arange(width, dtype=np.uint8)[np.newaxis, :]
    return Image.fromarray(arr)


# ===== Config =====

def test_config_defaults():
    placement = PlacementConfig()
    assert placement.position == "southwest"
    assert placement.padding == 20
    assert placement.opacity == 1.0
    assert placement.logo_width == 300
    assert placement.caption_gap == 10

    tile = TileConfig()
    assert tile.logo_width == 112
    assert tile.opacity == 0.15
    assert tile.spacing == 25
    assert tile.angle == -30


@pytest.mark.parametrize("opacity", [0.0, -0.1, 1.01])
def test_config_rejects_bad_opacity(opacity):
    with pytest.raises(ValueError):
        PlacementConfig(opacity=opacity)
    with pytest.raises(ValueError):
        TileConfig(opacity=opacity)


def test_config_rejects_bad_sizes():
    with pytest.raises(ValueError):
        PlacementConfig(logo_width=0)
    with pytest.raises(ValueError):
        TileConfig(spacing=-5)


def test_negative_padding_is_allowed():
    assert PlacementConfig(padding=-15).padding == -15


def test_config_is_immutable():
    config = PlacementConfig()
    with pytest.raises(dataclasses.FrozenInstanceError):
        config.opacity = 0.5


# ===== Raster helpers =====

def test_round_half_up():
    assert round_half_up(2.5) == 3
    assert round_half_up(0.5) == 1
    assert round_half_up(-0.5) == 0
    assert round_half_up(-68.5) == -68
    assert round_half_up(-38.6) == -39


def test_scale_alpha_half_opacity():
    image = alpha_ramp_image()
    original = np.array(image)

    scaled = np.array(scale_alpha(image, 0.5))

    expected = np.floor(original[:, :, 3].astype(np.float64) * 0.5 + 0.5)
    assert np.array_equal(scaled[:, :, 3], expected.astype(np.uint8))
    # RGB untouched
    assert np.array_equal(scaled[:, :, :3], original[:, :, :3])


def test_scale_alpha_full_opacity_is_identity():
    image = alpha_ramp_image()
    assert np.array_equal(np.array(scale_alpha(image, 1.0)), np.array(image))


def test_scale_alpha_adds_alpha_channel():
    scaled = scale_alpha(Image.new("RGB", (4, 4), (1, 2, 3)), 0.15)
    assert scaled.mode == "RGBA"
    # 255 * 0.15 = 38.25
    assert set(np.array(scaled)[:, :, 3].ravel()) == {38}


def test_ensure_rgba_scales_16_bit_grayscale():
    image = Image.fromarray(np.full((4, 4), 30000, dtype=np.uint16))
    assert image.mode.startswith("I")

    reduced = reduce_bit_depth(image)
    assert reduced.mode == "L"
    # 30000 / 257 = 116.7
    assert reduced.getpixel((0, 0)) == 117

    assert ensure_rgba(image).getpixel((2, 2)) == (117, 117, 117, 255)


def test_reduce_bit_depth_leaves_8_bit_alone():
    image = Image.new("RGB", (2, 2), (1, 2, 3))
    assert reduce_bit_depth(image) is image


def test_decode_image_rejects_garbage():
    with pytest.raises(WatermarkError):
        decode_image(b"definitely not an image")
    with pytest.raises(AssetError):
        decode_image(b"", "logo", AssetError)


def test_image_size_requires_dimensions():
    assert image_size(Image.new("RGB", (3, 7))) == (3, 7)
    with pytest.raises(DimensionError):
        image_size(SimpleNamespace(size=(0, 10)))
    with pytest.raises(DimensionError):
        image_size(object())


def test_resize_to_width_keeps_aspect_ratio():
    resized = resize_to_width(Image.new("RGBA", (200, 100)), 300)
    assert resized.size == (300, 150)

    resized = resize_to_width(Image.new("RGBA", (3, 1)), 2)
    assert resized.size == (2, 1)


def test_rotate_clockwise_expands_with_transparent_corners():
    square = Image.new("RGBA", (40, 40), (255, 255, 255, 255))
    rotated = rotate_clockwise(square, 45)

    assert rotated.width > 40 and rotated.height > 40
    assert rotated.getpixel((0, 0))[3] == 0
    assert rotated.getpixel((rotated.width // 2, rotated.height // 2))[3] == 255


def test_rotate_clockwise_direction():
    # Mark the top-right corner; a 90° clockwise turn moves it bottom-right
    image = Image.new("RGBA", (20, 10), (0, 0, 0, 0))
    image.putpixel((19, 0), (255, 0, 0, 255))
    rotated = rotate_clockwise(image, 90)

    assert rotated.size == (10, 20)
    assert rotated.getpixel((9, 19))[3] == 255


def test_composite_over_clips_negative_offsets():
    base = new_transparent(10, 10)
    overlay = Image.new("RGBA", (6, 6), (0, 255, 0, 255))

    composite_over(base, overlay, -3, -2)

    assert base.getpixel((0, 0)) == (0, 255, 0, 255)
    assert base.getpixel((2, 3)) == (0, 255, 0, 255)
    assert base.getpixel((3, 0))[3] == 0
    assert base.getpixel((0, 4))[3] == 0


def test_composite_over_clips_far_edges_and_misses():
    base = new_transparent(10, 10)
    overlay = Image.new("RGBA", (6, 6), (0, 255, 0, 255))

    composite_over(base, overlay, 7, 8)
    assert base.getpixel((9, 9)) == (0, 255, 0, 255)
    assert base.getpixel((6, 9))[3] == 0

    before = np.array(base)
    composite_over(base, overlay, 20, 20)
    assert np.array_equal(np.array(base), before)


def test_composite_over_blends_source_over():
    base = Image.new("RGBA", (1, 1), (0, 0, 255, 255))
    overlay = Image.new("RGBA", (1, 1), (255, 0, 0, 128))

    r, g, b, a = composite_over(base, overlay).getpixel((0, 0))

    assert a == 255
    assert abs(r - 128) <= 1
    assert abs(b - 127) <= 1


# ===== Asset loading =====

def test_read_asset_bytes_from_bytes_and_path(tmp_path, logo_png):
    path = tmp_path / "logo.png"
    path.write_bytes(logo_png)

    assert read_asset_bytes(logo_png, "logo") == logo_png
    assert read_asset_bytes(path, "logo") == logo_png
    assert read_asset_bytes(str(path), "logo") == logo_png


def test_missing_asset_sources_raise_asset_error(tmp_path):
    with pytest.raises(AssetError):
        read_asset_bytes(None, "logo")
    with pytest.raises(AssetError):
        read_asset_bytes(tmp_path / "nope.png", "logo")


def test_non_image_asset_raises_asset_error():
    with pytest.raises(AssetError):
        load_asset(b"GIF? no, just text", "logo")


def test_load_asset_converts_to_rgba():
    image = load_asset(solid_png(5, 5, (1, 2, 3)), "logo")
    assert image.mode == "RGBA"
    assert image.size == (5, 5)


@pytest.mark.skipif(not cairosvg_available(), reason="cairosvg/cairo not available")
def test_svg_assets_are_rasterized():
    svg = (
        b'<svg xmlns="http://www.w3.org/2000/svg" width="80" height="20">'
        b'<rect width="80" height="20" fill="white"/></svg>'
    )
    image = load_asset(svg, "logo")
    assert image.size == (80, 20)
    assert image.getpixel((40, 10)) == (255, 255, 255, 255)


# ===== Mark assets =====

def test_placement_mark_layout():
    # 200x100 logo -> 100x50, caption 200x20, gap 10 -> 200x80
    config = PlacementConfig(
        logo_source=solid_png(200, 100, (255, 0, 0, 255)),
        caption_source=solid_png(200, 20, (0, 0, 255, 255)),
        logo_width=100
    )

    mark = build_placement_mark(config)

    assert isinstance(mark, MarkAsset)
    assert mark.size == (200, 80)
    r, g, b, a = mark.image.getpixel((10, 10))
    assert r >= 250 and g <= 5 and b <= 5 and a >= 250
    assert mark.image.getpixel((150, 10))[3] == 0  # right of the logo
    assert mark.image.getpixel((10, 55))[3] == 0   # gap
    assert mark.image.getpixel((150, 70)) == (0, 0, 255, 255)


def test_placement_mark_width_follows_wider_logo():
    config = PlacementConfig(
        logo_source=solid_png(300, 150),
        caption_source=solid_png(400, 34),
        logo_width=300
    )
    assert build_placement_mark(config).size == (400, 194)


def test_placement_mark_scales_alpha_below_full_opacity():
    config = PlacementConfig(
        logo_source=solid_png(40, 20),
        caption_source=solid_png(40, 10),
        logo_width=40,
        opacity=0.5
    )
    mark = build_placement_mark(config)

    # 255 * 0.5 = 127.5 rounds up
    assert mark.image.getpixel((5, 5))[3] == 128
    assert mark.image.getpixel((5, 35))[3] == 128


def test_placement_mark_keeps_alpha_at_full_opacity():
    logo = Image.new("RGBA", (40, 20), (255, 255, 255, 77))
    config = PlacementConfig(
        logo_source=to_png(logo),
        caption_source=solid_png(40, 10, (255, 255, 255, 201)),
        logo_width=40
    )
    mark = build_placement_mark(config)

    assert mark.image.getpixel((5, 5))[3] == 77
    assert mark.image.getpixel((5, 35))[3] == 201


def test_placement_mark_bad_logo_raises_asset_error():
    config = PlacementConfig(logo_source=b"<html>", caption_source=solid_png(10, 10))
    with pytest.raises(AssetError):
        build_placement_mark(config)


def test_placement_mark_bad_caption_raises_asset_error():
    config = PlacementConfig(logo_source=solid_png(10, 10), caption_source=b"\x00\x01\x02")
    with pytest.raises(AssetError):
        build_placement_mark(config)


def test_tile_mark_scales_alpha_unconditionally():
    logo = Image.new("RGBA", (56, 28), (255, 255, 255, 200))
    config = TileConfig(logo_source=to_png(logo), logo_width=56, opacity=1.0, angle=0)

    tile = build_tile_mark(config)

    assert tile.size == (56, 28)
    assert set(np.array(tile.image)[:, :, 3].ravel()) == {200}


def test_tile_mark_default_opacity():
    config = TileConfig(logo_source=solid_png(112, 56), angle=0)
    tile = build_tile_mark(config)
    # 255 * 0.15 = 38.25
    assert tile.image.getpixel((50, 20))[3] == 38


def test_tile_mark_is_counter_rotated():
    config = TileConfig(logo_source=solid_png(100, 20), logo_width=100, angle=-30)
    tile = build_tile_mark(config)

    rad = math.radians(30)
    expected_w = 100 * math.cos(rad) + 20 * math.sin(rad)
    expected_h = 100 * math.sin(rad) + 20 * math.cos(rad)
    assert abs(tile.width - expected_w) <= 2
    assert abs(tile.height - expected_h) <= 2
    # Corners of the bounding box are transparent fill
    assert tile.image.getpixel((0, 0))[3] == 0


def test_tile_mark_bad_logo_raises_asset_error():
    with pytest.raises(AssetError):
        build_tile_mark(TileConfig(logo_source=b"not a png"))
