"""
扩散填充 - 单一分辨率下的迭代邻域平均

两种策略：
- SPACE_FILL（填充）：先清空待修复像素（alpha=0），再从边缘向内逐圈传播颜色。
  像素一旦被填上就移出待处理集合；某一轮没有任何新像素被填上时提前结束。
- SEAM_HEAL（融合）：待修复像素已经有初值（通常是上一层放大后的结果），
  每一轮都对全部待修复像素重新取邻域平均，相当于只作用在洞内的模糊，
  固定执行 max_passes 轮。

每一轮都只读取上一轮提交后的快照，整轮算完后再统一写回（双缓冲），
结果与像素遍历顺序无关。
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Callable, Optional, Tuple

import numpy as np

from ..constants import NEIGHBOUR_OFFSETS
from ..errors import DimensionMismatch, InpaintAborted
from .raster import HoleMask, RasterBuffer

logger = logging.getLogger(__name__)


class FillPolicy(enum.Enum):
    SPACE_FILL = "space_fill"
    SEAM_HEAL = "seam_heal"


@dataclass
class FillStats:
    """一次填充的统计信息"""

    passes: int = 0
    filled: int = 0          # 所有轮次提交的像素总数
    unfilled: int = 0        # 结束时仍为 alpha 0 的待修复像素数


def _window(bbox: Tuple[int, int, int, int], width: int, height: int) -> Tuple[slice, slice]:
    # 洞的包围盒外扩一圈：洞像素的所有邻居都落在窗口内
    x0, y0, x1, y1 = bbox
    return slice(max(y0 - 1, 0), min(y1 + 1, height)), slice(max(x0 - 1, 0), min(x1 + 1, width))


def neighbour_sums(pixels: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """
    统计每个像素 8 邻域内有效像素（alpha > 0）的 RGB 之和与个数

    越界的邻居不计入（边角像素的邻居更少）。

    Args:
        pixels: (h, w, 4) uint8 数组

    Returns:
        (sums, counts)：形状 (h, w, 3) 与 (h, w) 的 int32 数组
    """
    h, w = pixels.shape[:2]
    valid = (pixels[..., 3] > 0).astype(np.int32)
    weighted = pixels[..., :3].astype(np.int32) * valid[..., None]

    padded_rgb = np.pad(weighted, ((1, 1), (1, 1), (0, 0)))
    padded_valid = np.pad(valid, 1)

    sums = np.zeros((h, w, 3), dtype=np.int32)
    counts = np.zeros((h, w), dtype=np.int32)
    for dx, dy in NEIGHBOUR_OFFSETS:
        sums += padded_rgb[1 + dy:1 + dy + h, 1 + dx:1 + dx + w]
        counts += padded_valid[1 + dy:1 + dy + h, 1 + dx:1 + dx + w]
    return sums, counts


class DiffusionFiller:
    """单一分辨率的扩散填充器"""

    def __init__(self, should_abort: Optional[Callable[[], bool]] = None):
        """
        Args:
            should_abort: 每轮开始前调用，返回 True 时抛出 InpaintAborted
        """
        self.should_abort = should_abort

    def fill(
        self,
        buffer: RasterBuffer,
        mask: HoleMask,
        max_passes: int,
        policy: FillPolicy,
    ) -> FillStats:
        """
        原地填充 buffer 中的待修复像素

        Args:
            buffer: 待填充的RGBA缓冲区（原地修改）
            mask: 同尺寸蒙版
            max_passes: 最大迭代轮数
            policy: 填充策略

        Returns:
            FillStats

        Raises:
            DimensionMismatch: 蒙版与缓冲区尺寸不一致
            InpaintAborted: should_abort 返回 True
        """
        if buffer.size != mask.size:
            raise DimensionMismatch(buffer.size, mask.size)

        stats = FillStats()
        bbox = mask.bounding_box()
        if bbox is None:
            return stats

        rows, cols = _window(bbox, buffer.width, buffer.height)
        active = mask.holes[rows, cols].copy()
        front = buffer.pixels[rows, cols].copy()

        if policy is FillPolicy.SPACE_FILL:
            front[active, 3] = 0

        back = np.empty_like(front)
        remaining = int(np.count_nonzero(active))

        while remaining > 0 and stats.passes < max_passes:
            if self.should_abort is not None and self.should_abort():
                buffer.pixels[rows, cols] = front
                raise InpaintAborted(f"扩散填充在第 {stats.passes} 轮后被中止")

            sums, counts = neighbour_sums(front)
            update = active & (counts > 0)
            filled = int(np.count_nonzero(update))

            if filled:
                n = counts[update][:, None]
                np.copyto(back, front)
                # 四舍五入（0.5 向上）：floor(sum / n + 0.5)
                back[update, :3] = ((2 * sums[update] + n) // (2 * n)).astype(np.uint8)
                back[update, 3] = 255
                front, back = back, front

            stats.passes += 1
            stats.filled += filled

            if policy is FillPolicy.SPACE_FILL:
                if filled == 0:
                    break
                active &= ~update
                remaining -= filled

        buffer.pixels[rows, cols] = front

        holes = mask.holes
        stats.unfilled = int(np.count_nonzero(holes & (buffer.alpha == 0)))
        if stats.unfilled:
            logger.warning(f"扩散填充结束后仍有 {stats.unfilled} 个像素无法到达（没有可用的邻居）")
        logger.debug(
            f"扩散填充完成: policy={policy.value}, passes={stats.passes}, "
            f"filled={stats.filled}, size={buffer.width}x{buffer.height}"
        )
        return stats
