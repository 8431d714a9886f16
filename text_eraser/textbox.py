"""
TextBox数据类 - OCR识别出的文字及其在幻灯片上的位置
坐标使用百分比（0-100，相对于图片宽高）
"""

import copy
import logging
from typing import Dict, Any, Optional

from .constants import OCR_BOX_SCALE

logger = logging.getLogger(__name__)


class TextBox:
    """文本框数据类，包含文字内容与百分比坐标"""

    def __init__(
        self,
        xmin: float,
        ymin: float,
        xmax: float,
        ymax: float,
        text: str = "",
    ):
        """
        初始化文本框

        Args:
            xmin: 左边界（百分比）
            ymin: 上边界（百分比）
            xmax: 右边界（百分比）
            ymax: 下边界（百分比）
            text: 文本内容

        Raises:
            ValueError: 如果坐标无效
        """
        for name, value in (("xmin", xmin), ("ymin", ymin), ("xmax", xmax), ("ymax", ymax)):
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ValueError(f"{name}必须是数字，得到: {type(value)}")
        if xmax < xmin:
            raise ValueError(f"xmax({xmax}) 不能小于 xmin({xmin})")
        if ymax < ymin:
            raise ValueError(f"ymax({ymax}) 不能小于 ymin({ymin})")

        self.xmin = float(xmin)
        self.ymin = float(ymin)
        self.xmax = float(xmax)
        self.ymax = float(ymax)
        self.text = str(text)

    @property
    def width(self) -> float:
        return self.xmax - self.xmin

    @property
    def height(self) -> float:
        return self.ymax - self.ymin

    @classmethod
    def from_ocr_box(cls, text: str, box: Dict[str, Any]) -> "TextBox":
        """从 0-1000 归一化的OCR坐标创建"""
        factor = OCR_BOX_SCALE / 100
        return cls(
            xmin=box["xmin"] / factor,
            ymin=box["ymin"] / factor,
            xmax=box["xmax"] / factor,
            ymax=box["ymax"] / factor,
            text=text,
        )

    def to_pixels(self, width: int, height: int):
        """
        转换为像素坐标

        Returns:
            (x1, y1, x2, y2)
        """
        return (
            self.xmin / 100 * width,
            self.ymin / 100 * height,
            self.xmax / 100 * width,
            self.ymax / 100 * height,
        )

    def to_dict(self) -> Dict[str, Any]:
        """
        转换为字典

        Returns:
            {"text": ..., "box": {"xmin", "ymin", "xmax", "ymax"}}
        """
        return {
            "text": self.text,
            "box": {
                "xmin": self.xmin,
                "ymin": self.ymin,
                "xmax": self.xmax,
                "ymax": self.ymax,
            },
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Optional["TextBox"]:
        """
        从字典创建文本框

        Args:
            data: to_dict() 格式的字典

        Returns:
            TextBox实例，如果数据无效则返回None

        Raises:
            ValueError: 如果缺少必需的字段
        """
        if not isinstance(data, dict):
            logger.error(f"from_dict需要字典类型，得到: {type(data)}")
            return None

        box = data.get("box")
        if not isinstance(box, dict):
            raise ValueError("缺少必需字段: box")
        missing_fields = [f for f in ("xmin", "ymin", "xmax", "ymax") if f not in box]
        if missing_fields:
            logger.error(f"缺少必需字段: {missing_fields}")
            raise ValueError(f"缺少必需字段: {missing_fields}")

        try:
            return cls(
                xmin=box["xmin"],
                ymin=box["ymin"],
                xmax=box["xmax"],
                ymax=box["ymax"],
                text=data.get("text", ""),
            )
        except (ValueError, TypeError) as e:
            logger.error(f"从字典创建TextBox失败: {e}")
            return None

    def copy(self) -> "TextBox":
        return copy.deepcopy(self)

    def contains_point(self, px: float, py: float) -> bool:
        """检查点（百分比坐标）是否在文本框内"""
        return self.xmin <= px <= self.xmax and self.ymin <= py <= self.ymax

    def intersects(self, other: "TextBox") -> bool:
        """检查是否与另一个文本框相交"""
        return not (
            self.xmax < other.xmin or
            other.xmax < self.xmin or
            self.ymax < other.ymin or
            other.ymax < self.ymin
        )

    def __repr__(self) -> str:
        return (f"TextBox(xmin={self.xmin}, ymin={self.ymin}, "
                f"xmax={self.xmax}, ymax={self.ymax}, "
                f"text='{self.text[:20]}')")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TextBox):
            return False
        return (self.xmin == other.xmin and self.ymin == other.ymin and
                self.xmax == other.xmax and self.ymax == other.ymax and
                self.text == other.text)
