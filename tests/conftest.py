import numpy as np
import pytest

from text_eraser.core.raster import HoleMask, RasterBuffer


def solid(width, height, rgba=(255, 255, 255, 255)):
    return RasterBuffer.blank(width, height, rgba)


def horizontal_gradient(width, height):
    """红色通道从左到右 0 -> 255 的渐变，G/B 固定"""
    pixels = np.zeros((height, width, 4), dtype=np.uint8)
    ramp = np.rint(np.arange(width) * 255.0 / (width - 1)).astype(np.uint8)
    pixels[..., 0] = ramp[None, :]
    pixels[..., 1] = 80
    pixels[..., 2] = 160
    pixels[..., 3] = 255
    return RasterBuffer(pixels)


def rect_mask(width, height, x0, y0, x1, y1):
    """矩形洞，右下为开区间"""
    holes = np.zeros((height, width), dtype=bool)
    holes[y0:y1, x0:x1] = True
    return HoleMask.from_holes(holes)


def ring_mask(size, inner, outer):
    yy, xx = np.mgrid[0:size, 0:size]
    c = (size - 1) / 2
    r = np.hypot(xx - c, yy - c)
    return HoleMask.from_holes((r >= inner) & (r <= outer))


@pytest.fixture
def white_4x4():
    return solid(4, 4)


@pytest.fixture
def center_2x2_mask():
    return rect_mask(4, 4, 1, 1, 3, 3)


@pytest.fixture
def gradient_64():
    return horizontal_gradient(64, 64)


@pytest.fixture
def center_hole_64():
    return rect_mask(64, 64, 22, 22, 42, 42)
