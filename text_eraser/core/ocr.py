"""
OCR 功能模块 - 文字识别与蒙版过滤

说明：
- PaddleOCR 为可选依赖（pip install text-eraser[ocr]），只在真正识别时才需要。
- 识别结果统一为 0-1000 归一化坐标：{"text": str, "box": {"xmin", "ymin", "xmax", "ymax"}}。
- filter_results_by_mask() 只保留落在涂抹区域内的文字，并把坐标换算为百分比。
"""

from __future__ import annotations

import logging
import os
import warnings
from typing import Any, Dict, Iterable, List, Optional

import cv2
import numpy as np

from ..constants import OCR_BOX_SCALE, OCR_MASK_ALPHA_THRESHOLD
from ..textbox import TextBox
from ..utils.resource_manager import temp_file_context
from .raster import HoleMask, RasterBuffer

try:
    from paddleocr import PaddleOCR
except Exception:  # pragma: no cover
    PaddleOCR = None

logger = logging.getLogger(__name__)

_QUIET_READY = False


def _quiet_startup_once() -> None:
    global _QUIET_READY
    if _QUIET_READY:
        return
    _QUIET_READY = True

    warnings.filterwarnings("ignore", message=r".*`lang` and `ocr_version` will be ignored.*")

    # 关闭 Paddle C++ 的 INFO/WARNING 日志（保留 ERROR+）
    os.environ.setdefault("GLOG_minloglevel", "2")
    os.environ.setdefault("FLAGS_minloglevel", "2")


def _sample_alpha(mask: RasterBuffer, x: float, y: float) -> int:
    i = mask.index(int(x), int(y))
    return int(mask.data[i + 3])


def filter_results_by_mask(
    results: Iterable[Dict[str, Any]],
    mask: HoleMask,
    alpha_threshold: int = OCR_MASK_ALPHA_THRESHOLD,
) -> List[TextBox]:
    """
    只保留与涂抹区域相交的文字

    判断规则：文字框中心点透明（alpha < 阈值）即保留；
    否则再检查左上角和右下角，任意一个透明也保留。

    Args:
        results: OCR结果，坐标为 0-1000 归一化
        mask: 蒙版（透明处为用户涂抹的区域）
        alpha_threshold: 透明判定阈值

    Returns:
        TextBox列表（百分比坐标）
    """
    width, height = mask.size
    kept: List[TextBox] = []

    for item in results:
        try:
            text = item["text"]
            box = item["box"]
            xmin = box["xmin"] / OCR_BOX_SCALE * width
            xmax = box["xmax"] / OCR_BOX_SCALE * width
            ymin = box["ymin"] / OCR_BOX_SCALE * height
            ymax = box["ymax"] / OCR_BOX_SCALE * height
        except (KeyError, TypeError) as e:
            logger.warning(f"跳过格式错误的OCR结果: {item} ({e})")
            continue

        center_x = (xmin + xmax) // 2
        center_y = (ymin + ymax) // 2

        is_masked = _sample_alpha(mask, center_x, center_y) < alpha_threshold
        if not is_masked:
            # 再检查两个角
            is_masked = (
                _sample_alpha(mask, xmin, ymin) < alpha_threshold
                or _sample_alpha(mask, xmax, ymax) < alpha_threshold
            )

        if is_masked:
            try:
                kept.append(TextBox.from_ocr_box(text, box))
            except ValueError as e:
                logger.warning(f"跳过无效的文字框: {item} ({e})")

    logger.info(f"OCR结果过滤: 共 {len(kept)} 条位于涂抹区域内")
    return kept


def polygon_to_box(poly, width: int, height: int) -> Dict[str, int]:
    """把检测多边形转换为 0-1000 归一化的外接矩形"""
    pts = np.asarray(poly, dtype=np.float64).reshape(-1, 2)
    x1, y1 = pts.min(axis=0)
    x2, y2 = pts.max(axis=0)

    def norm(value: float, size: int) -> int:
        return int(round(min(max(value / size, 0.0), 1.0) * OCR_BOX_SCALE))

    return {
        "xmin": norm(x1, width),
        "ymin": norm(y1, height),
        "xmax": norm(x2, width),
        "ymax": norm(y2, height),
    }


def parse_predict_result(result: Optional[list], width: int, height: int) -> List[Dict[str, Any]]:
    """
    把 PaddleOCR predict() 的输出（dt_polys / rec_texts）转换为统一格式

    Args:
        result: predict() 的返回值
        width: 图片宽度
        height: 图片高度
    """
    items: List[Dict[str, Any]] = []
    if not result:
        return items

    for page in result:
        try:
            polys = page.get("dt_polys", [])
            texts = page.get("rec_texts", [])
        except AttributeError as e:
            logger.warning(f"无法解析OCR结果: {e}")
            continue
        for poly, text in zip(polys, texts):
            if not text or not str(text).strip():
                continue
            items.append({"text": str(text), "box": polygon_to_box(poly, width, height)})
    return items


class TextRecognizer:
    """PaddleOCR 封装，延迟加载模型"""

    def __init__(
        self,
        device: str = "cpu",
        lang: str = "ch",
        alpha_threshold: int = OCR_MASK_ALPHA_THRESHOLD,
    ):
        self.device = device
        self.lang = lang
        self.alpha_threshold = alpha_threshold
        self._ocr = None

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "TextRecognizer":
        return cls(
            device=config.get("ocr_device", "cpu"),
            alpha_threshold=config.get("ocr_mask_alpha_threshold", OCR_MASK_ALPHA_THRESHOLD),
        )

    def _ensure_model(self):
        if self._ocr is not None:
            return self._ocr
        if PaddleOCR is None:
            raise RuntimeError("未安装 paddleocr，请执行: pip install text-eraser[ocr]")

        _quiet_startup_once()
        logger.info(f"正在加载OCR模型（{self.device.upper()}）...")
        self._ocr = PaddleOCR(
            lang=self.lang,
            device=self.device,
            use_doc_orientation_classify=False,
            use_doc_unwarping=False,
            use_textline_orientation=False,
        )
        logger.info("OCR模型加载完成")
        return self._ocr

    def recognize(self, image: RasterBuffer) -> List[Dict[str, Any]]:
        """
        识别整张图片中的文字

        Returns:
            0-1000 归一化坐标的结果列表
        """
        ocr = self._ensure_model()
        bgr = cv2.cvtColor(image.pixels, cv2.COLOR_RGBA2BGR)

        with temp_file_context(suffix=".png") as temp_path:
            if not cv2.imwrite(temp_path, bgr):
                raise IOError(f"Failed to write image to {temp_path}")
            result = ocr.predict(temp_path)

        items = parse_predict_result(result, image.width, image.height)
        logger.info(f"OCR识别完成: {len(items)} 条文字")
        return items

    def recognize_masked(
        self,
        image: RasterBuffer,
        mask: HoleMask,
        alpha_threshold: Optional[int] = None,
    ) -> List[TextBox]:
        """识别整张图片，只返回涂抹区域内的文字"""
        if alpha_threshold is None:
            alpha_threshold = self.alpha_threshold
        return filter_results_by_mask(self.recognize(image), mask, alpha_threshold)
