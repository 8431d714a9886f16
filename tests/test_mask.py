import numpy as np
import pytest

from text_eraser.core.raster import HoleMask
from text_eraser.features.mask import MaskBuilder


def test_empty_builder_has_no_holes():
    builder = MaskBuilder(10, 8)
    assert builder.is_empty()
    mask = builder.build()
    assert isinstance(mask, HoleMask)
    assert mask.size == (10, 8)
    assert mask.hole_count() == 0
    assert np.all(mask.pixels == 255)


def test_rect_becomes_hole():
    builder = MaskBuilder(10, 10)
    builder.rect(2, 2, 6, 6)
    mask = builder.build()
    assert mask.hole_count() == 16
    assert mask.bounding_box() == (2, 2, 6, 6)
    assert mask.get_pixel(3, 3)[3] == 0


def test_rect_corners_are_normalized():
    a = MaskBuilder(10, 10)
    a.rect(6, 6, 2, 2)
    b = MaskBuilder(10, 10)
    b.rect(2, 2, 6, 6)
    assert a.build() == b.build()


def test_degenerate_rect_is_ignored():
    builder = MaskBuilder(10, 10)
    builder.rect(3, 3, 3, 8)
    assert builder.is_empty()
    assert builder.strokes == []


def test_single_pass_does_not_cross_threshold():
    builder = MaskBuilder(10, 10)
    builder.rect(0, 0, 5, 5)
    # 255 * 0.5 = 127.5 -> 128，仍然不是洞
    assert builder.build(passes=1).hole_count() == 0

    builder.rect(0, 0, 5, 5)
    assert builder.build(passes=1).hole_count() == 25


def test_erase_rect_removes_coverage():
    builder = MaskBuilder(10, 10)
    builder.rect(2, 2, 6, 6)
    builder.erase_rect(2, 2, 4, 6)
    mask = builder.build()
    assert mask.hole_count() == 8
    assert mask.bounding_box() == (4, 2, 6, 6)


def test_brush_and_eraser_strokes():
    builder = MaskBuilder(40, 40, brush_size=6)
    builder.brush([(10, 20), (30, 20)])
    mask = builder.build()
    assert mask.holes[20, 20]
    assert not mask.holes[0, 0]

    builder.erase([(20, 20)], size=10)
    assert not builder.build().holes[20, 20]
    assert builder.build().holes[20, 10]
    assert [s["type"] for s in builder.strokes] == ["brush", "eraser"]


def test_add_regions_with_padding():
    builder = MaskBuilder(100, 100)
    count = builder.add_regions([{"xmin": 10, "ymin": 10, "xmax": 20, "ymax": 20}], padding=2)
    assert count == 1
    mask = builder.build()
    assert mask.bounding_box() == (8, 8, 22, 22)
    assert mask.hole_count() == 14 * 14


def test_add_regions_clamped_to_image():
    builder = MaskBuilder(50, 50)
    builder.add_regions([{"xmin": 0, "ymin": 90, "xmax": 10, "ymax": 100}])
    assert builder.build().bounding_box() == (0, 43, 9, 50)


def test_clear():
    builder = MaskBuilder(10, 10)
    builder.rect(0, 0, 10, 10)
    builder.clear()
    assert builder.is_empty()
    assert builder.build().hole_count() == 0


def test_coverage_image():
    builder = MaskBuilder(4, 4)
    builder.rect(0, 0, 2, 2)
    preview = builder.coverage_image()
    assert preview.mode == "L"
    assert preview.getpixel((0, 0)) == 128
    assert preview.getpixel((3, 3)) == 0


@pytest.mark.parametrize("kwargs", [
    {"width": 0, "height": 5},
    {"width": 5, "height": 5, "opacity": 0},
    {"width": 5, "height": 5, "brush_size": 0},
])
def test_invalid_arguments(kwargs):
    with pytest.raises(ValueError):
        MaskBuilder(**kwargs)


def test_invalid_passes():
    with pytest.raises(ValueError):
        MaskBuilder(4, 4).build(passes=0)
