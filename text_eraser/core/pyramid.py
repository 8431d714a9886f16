"""
分层扩散修复（由粗到细）

1. 缩小到 1/8，用 SPACE_FILL 从洞的边缘把颜色填满。
2. 放大到 1/4，把上一层的结果放大后注入洞内作为初值，再用 SEAM_HEAL 融合接缝。
3. 1/2、1/1 同上。

大尺度结构（渐变、天空）在最粗层一次确定，后续每层只需少量迭代修正细节。

重采样策略固定：缩小用面积平均（cv2.INTER_AREA），放大用双线性（cv2.INTER_LINEAR）。
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence, Tuple

import cv2
import numpy as np

from ..constants import BASE_FILL_PASSES, HEAL_PASSES, PYRAMID_SCALES
from ..errors import DimensionMismatch, SurfaceAllocationFailure
from .diffusion import DiffusionFiller, FillPolicy
from .raster import HoleMask, RasterBuffer

logger = logging.getLogger(__name__)


@dataclass
class PyramidLevel:
    """金字塔中的一层"""

    scale: float
    width: int
    height: int
    image: RasterBuffer
    mask: HoleMask
    guess: Optional[RasterBuffer] = None


def level_size(width: int, height: int, scale: float) -> Tuple[int, int]:
    """按比例计算层尺寸（向上取整，至少 1 像素）"""
    return max(1, math.ceil(width * scale)), max(1, math.ceil(height * scale))


def _resize(pixels: np.ndarray, width: int, height: int, interpolation: int) -> np.ndarray:
    try:
        return cv2.resize(pixels, (width, height), interpolation=interpolation)
    except cv2.error as e:
        raise SurfaceAllocationFailure(f"无法重采样到 {width}x{height}: {e}") from e


def downsample(buffer: RasterBuffer, width: int, height: int):
    """面积平均缩小；尺寸不变时返回副本"""
    if buffer.size == (width, height):
        return buffer.copy()
    return buffer.__class__(_resize(buffer.pixels, width, height, cv2.INTER_AREA))


def upsample(buffer: RasterBuffer, width: int, height: int) -> RasterBuffer:
    """双线性放大；尺寸不变时返回副本"""
    if buffer.size == (width, height):
        return buffer.copy()
    return RasterBuffer(_resize(buffer.pixels, width, height, cv2.INTER_LINEAR))


class PyramidOrchestrator:
    """由粗到细逐层运行扩散填充"""

    def __init__(
        self,
        scales: Sequence[float] = PYRAMID_SCALES,
        base_passes: int = BASE_FILL_PASSES,
        heal_passes: int = HEAL_PASSES,
        should_abort: Optional[Callable[[], bool]] = None,
    ):
        """
        Args:
            scales: 从粗到细的缩放比例，最后一项必须为 1
            base_passes: 最粗层 SPACE_FILL 的迭代轮数
            heal_passes: 其余各层 SEAM_HEAL 的迭代轮数
            should_abort: 传给 DiffusionFiller 的中止检查

        Raises:
            ValueError: 如果比例序列无效
        """
        scales = [float(s) for s in scales]
        if not scales or scales[-1] != 1.0:
            raise ValueError(f"金字塔最后一层必须是原始分辨率，得到: {scales}")
        if any(not 0 < s <= 1 for s in scales) or scales != sorted(scales):
            raise ValueError(f"金字塔比例必须在 (0, 1] 之间且从粗到细递增: {scales}")

        self.scales = scales
        self.base_passes = int(base_passes)
        self.heal_passes = int(heal_passes)
        self.filler = DiffusionFiller(should_abort=should_abort)

    def build_level(
        self,
        image: RasterBuffer,
        mask: HoleMask,
        scale: float,
        guess: Optional[RasterBuffer] = None,
    ) -> PyramidLevel:
        """
        生成一层：重采样原图与蒙版，如果有上一层的结果则注入洞内

        Args:
            image: 原图
            mask: 原始蒙版
            scale: 本层比例
            guess: 上一层（更粗）的填充结果

        Returns:
            PyramidLevel
        """
        width, height = level_size(image.width, image.height, scale)
        level = PyramidLevel(
            scale=scale,
            width=width,
            height=height,
            image=downsample(image, width, height),
            mask=downsample(mask, width, height),
        )

        if guess is not None:
            level.guess = upsample(guess, width, height)
            holes = level.mask.holes
            level.image.pixels[holes, :3] = level.guess.pixels[holes, :3]
            level.image.pixels[holes, 3] = 255

        return level

    def run(self, image: RasterBuffer, mask: HoleMask) -> RasterBuffer:
        """
        执行分层修复

        Args:
            image: 原图（不会被修改）
            mask: 同尺寸蒙版

        Returns:
            新缓冲区：洞内为最细层结果，洞外与原图逐字节一致
        """
        if image.size != mask.size:
            raise DimensionMismatch(image.size, mask.size)

        guess: Optional[RasterBuffer] = None
        sizes: List[str] = []

        for index, scale in enumerate(self.scales):
            level = self.build_level(image, mask, scale, guess)

            if index == 0:
                self.filler.fill(level.image, level.mask, self.base_passes, FillPolicy.SPACE_FILL)
            else:
                self.filler.fill(level.image, level.mask, self.heal_passes, FillPolicy.SEAM_HEAL)

            sizes.append(f"{level.width}x{level.height}")
            # 上一层的缓冲区在这里被丢弃
            guess = level.image

        result = image.copy()
        holes = mask.holes
        result.pixels[holes] = guess.pixels[holes]

        logger.debug(f"分层修复完成: {' -> '.join(sizes)}")
        return result
