"""
涂抹擦除功能模块 - 修复入口

两种模式：
- chart（图表/纯色）：全分辨率单次扩散填充，max_passes = max(宽, 高)，不加噪声。
  适合纯色区域和线条图，结果完全确定。
- photo（照片/渐变）：分层扩散修复 + 纹理噪声，适合照片、渐变背景。
"""

from __future__ import annotations

import enum
from typing import Any, Callable, Dict, Optional, Union

import numpy as np

from ..config import default_config
from ..core.diffusion import DiffusionFiller, FillPolicy
from ..core.pyramid import PyramidOrchestrator
from ..core.raster import (
    HoleMask,
    ImageSource,
    RasterBuffer,
    encode_png,
    load_mask,
    load_raster,
)
from ..core.texture import Texturizer
from ..errors import DimensionMismatch, UnsupportedMode
from ..logging_config import LoggerMixin


class InpaintMode(str, enum.Enum):
    CHART = "chart"
    PHOTO = "photo"

    @classmethod
    def parse(cls, value) -> "InpaintMode":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise UnsupportedMode(f"不支持的修复模式: {value!r}（可选: chart, photo）") from None


class InpaintService(LoggerMixin):
    """根据模式调度扩散填充、分层修复与纹理噪声"""

    def __init__(
        self,
        config: Optional[Dict[str, Any]] = None,
        rng: Optional[Union[np.random.Generator, int]] = None,
        should_abort: Optional[Callable[[], bool]] = None,
    ):
        """
        Args:
            config: 配置字典（缺失的键使用默认值）
            rng: 纹理噪声使用的随机数生成器或种子
            should_abort: 每轮迭代前调用的中止检查
        """
        self.config = default_config()
        if config:
            self.config.update(config)
        self.rng = rng
        self.should_abort = should_abort

    def _fill_single_level(self, image: RasterBuffer, mask: HoleMask) -> RasterBuffer:
        filler = DiffusionFiller(should_abort=self.should_abort)
        stats = filler.fill(image, mask, max(image.width, image.height), FillPolicy.SPACE_FILL)
        self.logger.info(f"色彩扩散完成: {stats.passes} 轮，填充 {stats.filled} 个像素")
        return image

    def _fill_pyramid(self, image: RasterBuffer, mask: HoleMask) -> RasterBuffer:
        pyramid = PyramidOrchestrator(
            scales=self.config["pyramid_scales"],
            base_passes=self.config["base_fill_passes"],
            heal_passes=self.config["heal_passes"],
            should_abort=self.should_abort,
        )
        result = pyramid.run(image, mask)

        texturizer = Texturizer(
            bound=self.config["noise_bound"],
            rng=self.rng,
            monochrome=self.config["noise_monochrome"],
        )
        texturizer.apply(result, mask)
        self.logger.info(f"影像融合完成: {len(pyramid.scales)} 层")
        return result

    def inpaint(self, image: ImageSource, mask: ImageSource, mode) -> RasterBuffer:
        """
        修复图片中蒙版标记的区域

        Args:
            image: 原图（任何 load_raster 支持的输入）
            mask: 同尺寸蒙版（alpha < 128 为待修复区域）
            mode: "chart" 或 "photo"，必须显式给出

        Returns:
            与原图同尺寸的新缓冲区，原图输入不会被修改

        Raises:
            UnsupportedMode: 未知模式
            ImageLoadFailure: 原图或蒙版无法解码
            DimensionMismatch: 尺寸不一致
            SurfaceAllocationFailure: 无法分配工作缓冲区
            InpaintAborted: 被 should_abort 中止
        """
        mode = InpaintMode.parse(mode)

        source = load_raster(image)
        hole_mask = load_mask(mask)
        if source.size != hole_mask.size:
            raise DimensionMismatch(source.size, hole_mask.size)

        hole_count = hole_mask.hole_count()
        self.logger.info(
            f"开始修复: mode={mode.value}, size={source.width}x{source.height}, holes={hole_count}"
        )
        if hole_count == 0:
            return source

        if mode is InpaintMode.CHART:
            return self._fill_single_level(source, hole_mask)
        return self._fill_pyramid(source, hole_mask)


def perform_inpainting(
    image_src: ImageSource,
    mask_src: ImageSource,
    mode,
    *,
    config: Optional[Dict[str, Any]] = None,
    rng: Optional[Union[np.random.Generator, int]] = None,
    should_abort: Optional[Callable[[], bool]] = None,
) -> bytes:
    """
    修复并编码为PNG

    Returns:
        PNG字节（可用 core.raster.to_data_url 转为 data URL）
    """
    service = InpaintService(config=config, rng=rng, should_abort=should_abort)
    result = service.inpaint(image_src, mask_src, mode)
    return encode_png(result)
