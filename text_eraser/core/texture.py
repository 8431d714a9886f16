"""
纹理噪声 - 给填充区域加上有界的随机扰动，避免纯平均带来的"塑料感"
"""

from __future__ import annotations

import logging
from typing import Optional, Union

import numpy as np

from ..constants import NOISE_BOUND
from ..errors import DimensionMismatch
from .raster import HoleMask, RasterBuffer

logger = logging.getLogger(__name__)


class Texturizer:
    """只作用于待修复像素的有界噪声"""

    def __init__(
        self,
        bound: float = NOISE_BOUND,
        rng: Optional[Union[np.random.Generator, int]] = None,
        monochrome: bool = True,
    ):
        """
        Args:
            bound: 每个通道允许的最大偏移量
            rng: numpy随机数生成器或种子；None 时使用系统熵
            monochrome: True 时每个像素的 R/G/B 共用同一个噪声值（亮度颗粒），
                False 时每个通道独立取值
        """
        if bound < 0:
            raise ValueError(f"噪声幅度不能为负数: {bound}")
        self.bound = float(bound)
        self.rng = rng if isinstance(rng, np.random.Generator) else np.random.default_rng(rng)
        self.monochrome = monochrome

    def apply(self, buffer: RasterBuffer, mask: HoleMask) -> int:
        """
        原地给 buffer 的待修复像素加噪声，并把 alpha 置为 255

        Returns:
            处理的像素数
        """
        if buffer.size != mask.size:
            raise DimensionMismatch(buffer.size, mask.size)

        holes = mask.holes
        count = int(np.count_nonzero(holes))
        if count == 0:
            return 0

        shape = (count, 1) if self.monochrome else (count, 3)
        noise = self.rng.uniform(-self.bound, self.bound, size=shape)

        rgb = buffer.pixels[holes, :3].astype(np.float64)
        buffer.pixels[holes, :3] = np.clip(np.rint(rgb + noise), 0, 255).astype(np.uint8)
        buffer.pixels[holes, 3] = 255

        logger.debug(f"纹理噪声: {count} 个像素, bound={self.bound}")
        return count
