"""
蒙版生成模块 - 不依赖界面的涂抹层

涂抹层记录每个像素的覆盖度（0-1）：
- brush / rect：以 MASK_STROKE_OPACITY 的不透明度叠加（source-over）
- erase / erase_rect：按形状清除覆盖度（destination-out）

build() 从全白不透明的底开始，重复 N 次"减去覆盖度"，
被涂抹过的像素 alpha 会降到阈值以下，未涂抹的像素保持 255。
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional, Sequence, Tuple

import numpy as np
from PIL import Image, ImageDraw

from ..constants import MASK_BOX_PADDING, MASK_STROKE_OPACITY, MASK_SUBTRACT_PASSES
from ..core.raster import HoleMask

logger = logging.getLogger(__name__)

Point = Tuple[float, float]


class MaskBuilder:
    """按笔画构建 HoleMask"""

    def __init__(
        self,
        width: int,
        height: int,
        brush_size: int = 30,
        opacity: float = MASK_STROKE_OPACITY,
    ):
        """
        Args:
            width: 蒙版宽度（与原图一致）
            height: 蒙版高度
            brush_size: 默认笔刷直径
            opacity: 笔刷/框选的不透明度 (0, 1]

        Raises:
            ValueError: 如果参数无效
        """
        if width <= 0 or height <= 0:
            raise ValueError(f"蒙版尺寸无效: {width}x{height}")
        if not 0 < opacity <= 1:
            raise ValueError(f"不透明度必须在 (0, 1] 之间，得到: {opacity}")
        if brush_size <= 0:
            raise ValueError(f"笔刷大小必须是正数，得到: {brush_size}")

        self.width = int(width)
        self.height = int(height)
        self.brush_size = int(brush_size)
        self.opacity = float(opacity)
        self.coverage = np.zeros((self.height, self.width), dtype=np.float64)
        self.strokes: list = []

    def _new_shape(self):
        layer = Image.new("L", (self.width, self.height), 0)
        return layer, ImageDraw.Draw(layer)

    def _draw_path(self, draw: ImageDraw.ImageDraw, points: Sequence[Point], size: int) -> None:
        r = size // 2
        for i, (x, y) in enumerate(points):
            draw.ellipse([x - r, y - r, x + r, y + r], fill=255, outline=255)
            if i > 0:
                draw.line([points[i - 1], (x, y)], fill=255, width=size)

    @staticmethod
    def _draw_rect(draw: ImageDraw.ImageDraw, x1: float, y1: float, x2: float, y2: float) -> bool:
        left, right = sorted((x1, x2))
        top, bottom = sorted((y1, y2))
        if right - left < 1 or bottom - top < 1:
            return False
        # 右下为开区间
        draw.rectangle([left, top, right - 1, bottom - 1], fill=255)
        return True

    def _paint(self, layer: Image.Image) -> None:
        shape = np.asarray(layer, dtype=np.float64) / 255.0
        self.coverage += shape * self.opacity * (1.0 - self.coverage)

    def _erase(self, layer: Image.Image) -> None:
        shape = np.asarray(layer, dtype=np.float64) / 255.0
        self.coverage *= 1.0 - shape

    def brush(self, points: Sequence[Point], size: Optional[int] = None) -> None:
        """沿路径涂抹（圆头笔刷）"""
        if not points:
            return
        size = size or self.brush_size
        layer, draw = self._new_shape()
        self._draw_path(draw, list(points), size)
        self._paint(layer)
        self.strokes.append({"type": "brush", "points": list(points), "size": size})

    def rect(self, x1: float, y1: float, x2: float, y2: float) -> None:
        """框选涂抹"""
        layer, draw = self._new_shape()
        if self._draw_rect(draw, x1, y1, x2, y2):
            self._paint(layer)
            self.strokes.append({"type": "rect", "coords": (x1, y1, x2, y2)})

    def erase(self, points: Sequence[Point], size: Optional[int] = None) -> None:
        """沿路径擦除涂抹"""
        if not points:
            return
        size = size or self.brush_size
        layer, draw = self._new_shape()
        self._draw_path(draw, list(points), size)
        self._erase(layer)
        self.strokes.append({"type": "eraser", "points": list(points), "size": size})

    def erase_rect(self, x1: float, y1: float, x2: float, y2: float) -> None:
        """框选擦除涂抹"""
        layer, draw = self._new_shape()
        if self._draw_rect(draw, x1, y1, x2, y2):
            self._erase(layer)
            self.strokes.append({"type": "eraser-rect", "coords": (x1, y1, x2, y2)})

    def add_regions(self, regions: Iterable[dict], padding: int = MASK_BOX_PADDING) -> int:
        """
        根据检测到的文字区域涂抹

        Args:
            regions: 百分比坐标的区域列表 {"xmin", "ymin", "xmax", "ymax"}
            padding: 向外扩展的像素数

        Returns:
            涂抹的区域数
        """
        count = 0
        for region in regions:
            raw_x = region["xmin"] / 100 * self.width
            raw_y = region["ymin"] / 100 * self.height
            raw_w = (region["xmax"] - region["xmin"]) / 100 * self.width
            raw_h = (region["ymax"] - region["ymin"]) / 100 * self.height

            x = max(0, raw_x - padding)
            y = max(0, raw_y - padding)
            w = min(self.width - x, raw_w + padding * 2)
            h = min(self.height - y, raw_h + padding * 2)
            self.rect(x, y, x + w, y + h)
            count += 1

        logger.info(f"根据文字区域涂抹: {count} 个")
        return count

    def clear(self) -> None:
        """清空所有涂抹"""
        self.coverage[...] = 0
        self.strokes = []

    def is_empty(self) -> bool:
        return not np.any(self.coverage > 0)

    def coverage_image(self) -> Image.Image:
        """涂抹层预览（L模式，255为完全覆盖）"""
        return Image.fromarray(np.rint(self.coverage * 255).astype(np.uint8))

    def build(self, passes: int = MASK_SUBTRACT_PASSES) -> HoleMask:
        """
        生成蒙版：全白不透明底，重复 passes 次减去涂抹覆盖度

        Returns:
            HoleMask（涂抹处 alpha 接近 0，其余 255）
        """
        if passes <= 0:
            raise ValueError(f"passes必须是正数，得到: {passes}")

        alpha = 255.0 * np.power(1.0 - self.coverage, passes)
        pixels = np.full((self.height, self.width, 4), 255, dtype=np.uint8)
        pixels[..., 3] = np.clip(np.rint(alpha), 0, 255).astype(np.uint8)

        mask = HoleMask(pixels)
        logger.debug(f"蒙版生成完成: {mask.hole_count()} 个待修复像素")
        return mask
