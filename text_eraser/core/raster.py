"""
像素缓冲区模块 - RasterBuffer / HoleMask 以及图片的解码与编码

约定：
- 像素以 numpy uint8 数组保存，形状 (height, width, 4)，通道顺序 R,G,B,A。
- 展平后的下标与 (y * width + x) * 4 一一对应。
- HoleMask 只看 alpha 通道：alpha < 128 为待修复区域（hole），其余为保留区域。
"""

from __future__ import annotations

import base64
import logging
import os
from io import BytesIO
from typing import Optional, Tuple, Union

import numpy as np
from PIL import Image

from ..constants import HOLE_ALPHA_THRESHOLD
from ..errors import ImageLoadFailure, SurfaceAllocationFailure

logger = logging.getLogger(__name__)


class RasterBuffer:
    """RGBA 像素缓冲区"""

    def __init__(self, pixels: np.ndarray):
        """
        Args:
            pixels: 形状为 (height, width, 4) 的 uint8 数组（不复制，直接持有）

        Raises:
            ValueError: 如果数组形状或类型不符合约定
        """
        if not isinstance(pixels, np.ndarray):
            raise ValueError(f"pixels必须是numpy数组，得到: {type(pixels)}")
        if pixels.ndim != 3 or pixels.shape[2] != 4:
            raise ValueError(f"pixels形状必须是 (height, width, 4)，得到: {pixels.shape}")
        if pixels.dtype != np.uint8:
            raise ValueError(f"pixels类型必须是uint8，得到: {pixels.dtype}")
        if pixels.shape[0] == 0 or pixels.shape[1] == 0:
            raise ValueError(f"缓冲区尺寸不能为0: {pixels.shape[1]}x{pixels.shape[0]}")
        self.pixels = pixels

    @classmethod
    def blank(cls, width: int, height: int, fill: Tuple[int, int, int, int] = (0, 0, 0, 0)):
        """
        创建指定尺寸、统一颜色的缓冲区

        Raises:
            SurfaceAllocationFailure: 尺寸无效或内存不足
        """
        if int(width) <= 0 or int(height) <= 0:
            raise SurfaceAllocationFailure(f"无效的缓冲区尺寸: {width}x{height}")
        try:
            pixels = np.empty((int(height), int(width), 4), dtype=np.uint8)
        except (MemoryError, ValueError) as e:
            raise SurfaceAllocationFailure(f"无法分配 {width}x{height} 的缓冲区: {e}") from e
        pixels[...] = fill
        return cls(pixels)

    @classmethod
    def from_image(cls, image: Image.Image):
        """从PIL图片创建（统一转换为RGBA）"""
        if image.mode != "RGBA":
            image = image.convert("RGBA")
        try:
            pixels = np.array(image, dtype=np.uint8)
        except MemoryError as e:
            raise SurfaceAllocationFailure(f"无法分配 {image.size[0]}x{image.size[1]} 的缓冲区") from e
        return cls(pixels)

    @classmethod
    def from_buffer(cls, other: "RasterBuffer"):
        """复制另一个缓冲区的像素"""
        return cls(other.pixels.copy())

    def to_image(self) -> Image.Image:
        return Image.fromarray(self.pixels)

    @property
    def width(self) -> int:
        return self.pixels.shape[1]

    @property
    def height(self) -> int:
        return self.pixels.shape[0]

    @property
    def size(self) -> Tuple[int, int]:
        return self.width, self.height

    @property
    def data(self) -> np.ndarray:
        """展平视图，长度为 width * height * 4"""
        return self.pixels.reshape(-1)

    @property
    def alpha(self) -> np.ndarray:
        return self.pixels[..., 3]

    def index(self, x: int, y: int) -> int:
        """返回 (x, y) 在展平数组中的起始下标，坐标先钳制到图像范围内"""
        x = min(max(int(x), 0), self.width - 1)
        y = min(max(int(y), 0), self.height - 1)
        return (y * self.width + x) * 4

    def get_pixel(self, x: int, y: int) -> Tuple[int, int, int, int]:
        i = self.index(x, y)
        return tuple(int(v) for v in self.data[i:i + 4])

    def copy(self):
        return self.__class__(self.pixels.copy())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RasterBuffer):
            return NotImplemented
        return np.array_equal(self.pixels, other.pixels)

    __hash__ = None

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(width={self.width}, height={self.height})"


class HoleMask(RasterBuffer):
    """与目标图同尺寸的蒙版，alpha < 128 的像素为待修复区域"""

    threshold = HOLE_ALPHA_THRESHOLD

    @classmethod
    def from_holes(cls, holes: np.ndarray):
        """
        从布尔数组创建蒙版：True 为待修复（alpha 0），False 为保留（alpha 255）

        Args:
            holes: 形状为 (height, width) 的布尔数组
        """
        holes = np.asarray(holes, dtype=bool)
        if holes.ndim != 2:
            raise ValueError(f"holes必须是二维数组，得到: {holes.shape}")
        pixels = np.full(holes.shape + (4,), 255, dtype=np.uint8)
        pixels[holes, 3] = 0
        return cls(pixels)

    @property
    def holes(self) -> np.ndarray:
        return self.alpha < self.threshold

    @property
    def keep(self) -> np.ndarray:
        return self.alpha >= self.threshold

    def hole_count(self) -> int:
        return int(np.count_nonzero(self.holes))

    def hole_indices(self) -> np.ndarray:
        """所有待修复像素在展平数组中的起始下标"""
        return np.flatnonzero(self.holes) * 4

    def bounding_box(self) -> Optional[Tuple[int, int, int, int]]:
        """待修复区域的包围盒 (x0, y0, x1, y1)，右下为开区间；没有待修复像素时返回None"""
        holes = self.holes
        rows = np.any(holes, axis=1)
        cols = np.any(holes, axis=0)
        if not rows.any():
            return None
        y0, y1 = np.where(rows)[0][[0, -1]]
        x0, x1 = np.where(cols)[0][[0, -1]]
        return int(x0), int(y0), int(x1) + 1, int(y1) + 1


ImageSource = Union[RasterBuffer, Image.Image, np.ndarray, bytes, bytearray, str, os.PathLike]


def _decode_data_url(source: str) -> bytes:
    header, _, payload = source.partition(",")
    if ";base64" not in header:
        raise ValueError("只支持base64编码的data URL")
    return base64.b64decode(payload, validate=True)


def load_raster(source: ImageSource, *, cls=RasterBuffer, label: str = "图片"):
    """
    把各种形式的图片输入解码为缓冲区

    Args:
        source: 文件路径、原始字节、data URL、PIL图片、numpy数组或已有缓冲区
        cls: 返回的缓冲区类型（RasterBuffer 或 HoleMask）
        label: 日志与错误信息中使用的名称

    Returns:
        cls 实例（总是新的像素副本，不与输入共享内存）

    Raises:
        ImageLoadFailure: 输入无法解码
        SurfaceAllocationFailure: 内存不足
    """
    if isinstance(source, RasterBuffer):
        return cls(source.pixels.copy())

    try:
        if isinstance(source, Image.Image):
            image = source
        elif isinstance(source, np.ndarray):
            if source.ndim == 3 and source.shape[2] == 4 and source.dtype == np.uint8:
                return cls(source.copy())
            image = Image.fromarray(source)
        elif isinstance(source, (bytes, bytearray)):
            image = Image.open(BytesIO(bytes(source)))
        elif isinstance(source, str) and source.startswith("data:"):
            image = Image.open(BytesIO(_decode_data_url(source)))
        elif isinstance(source, (str, os.PathLike)):
            image = Image.open(os.fspath(source))
        else:
            raise ImageLoadFailure(f"不支持的{label}输入类型: {type(source)}")

        image = image.convert("RGBA")
        buffer = cls.from_image(image)

    except (ImageLoadFailure, SurfaceAllocationFailure):
        raise
    except MemoryError as e:
        raise SurfaceAllocationFailure(f"{label}解码时内存不足") from e
    except (OSError, ValueError, TypeError, Image.DecompressionBombError) as e:
        logger.error(f"{label}加载失败: {e}")
        raise ImageLoadFailure(f"无法加载{label}: {e}") from e

    logger.debug(f"{label}加载完成: {buffer.width}x{buffer.height}")
    return buffer


def load_mask(source: ImageSource) -> HoleMask:
    """解码蒙版输入"""
    return load_raster(source, cls=HoleMask, label="蒙版")


def encode_png(buffer: RasterBuffer) -> bytes:
    """把缓冲区编码为PNG字节"""
    out = BytesIO()
    buffer.to_image().save(out, "PNG")
    return out.getvalue()


def to_data_url(png_bytes: bytes, mime: str = "image/png") -> str:
    """把编码后的图片包装为 data URL，便于直接显示"""
    return f"data:{mime};base64,{base64.b64encode(png_bytes).decode()}"
