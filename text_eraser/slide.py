"""
Slide数据类 - 导出时每一页需要的信息
"""

import enum
import uuid
from dataclasses import dataclass, field
from typing import List, Optional

from PIL import Image

from .textbox import TextBox


class SlideStatus(enum.Enum):
    PENDING = "PENDING"          # 已导入，等待涂抹/处理
    PROCESSING = "PROCESSING"
    DONE = "DONE"                # 已处理，可以导出
    ERROR = "ERROR"


@dataclass
class Slide:
    original_image: Image.Image
    processed_image: Optional[Image.Image] = None
    ocr_data: List[TextBox] = field(default_factory=list)
    status: SlideStatus = SlideStatus.PENDING
    id: str = field(default_factory=lambda: uuid.uuid4().hex)

    @property
    def background(self) -> Image.Image:
        """导出用的底图：有处理结果时用处理结果，否则用原图"""
        return self.processed_image if self.processed_image is not None else self.original_image
