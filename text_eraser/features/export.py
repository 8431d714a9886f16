"""
导出功能模块 - 生成PPTX

每页：
- 底图按比例缩放后居中放在 16:9（10 x 5.625 英寸）页面上
- OCR识别的文字按百分比坐标叠加为可编辑文本框
"""

from __future__ import annotations

import logging
from typing import Sequence, Tuple

from PIL import Image

from pptx import Presentation
from pptx.dml.color import RGBColor
from pptx.enum.text import MSO_ANCHOR, PP_ALIGN
from pptx.oxml.ns import qn
from pptx.util import Inches, Pt

from ..constants import (
    MIN_TEXT_BOX_HEIGHT_INCH,
    MIN_TEXT_BOX_WIDTH_INCH,
    SLIDE_HEIGHT_INCH,
    SLIDE_WIDTH_INCH,
    TEXT_COLOR,
    TEXT_FILL_COLOR,
    TEXT_FILL_TRANSPARENCY,
)
from ..core.font_fit import fit_font_size_pt
from ..slide import Slide, SlideStatus
from ..textbox import TextBox
from ..utils.resource_manager import temp_file_context

logger = logging.getLogger(__name__)

BLANK_LAYOUT_INDEX = 6


def _hex_to_rgb(color: str) -> RGBColor:
    color_hex = color.lstrip("#")
    return RGBColor(int(color_hex[0:2], 16), int(color_hex[2:4], 16), int(color_hex[4:6], 16))


def fit_image_on_slide(
    img_w: int,
    img_h: int,
    slide_w: float = SLIDE_WIDTH_INCH,
    slide_h: float = SLIDE_HEIGHT_INCH,
) -> Tuple[float, float, float, float]:
    """
    计算图片在页面上的位置（保持比例，居中）

    Returns:
        (x, y, w, h)，单位英寸
    """
    if img_w <= 0 or img_h <= 0:
        raise ValueError(f"图片尺寸无效: {img_w}x{img_h}")

    img_ratio = img_w / img_h
    slide_ratio = slide_w / slide_h

    if img_ratio > slide_ratio:
        target_w = slide_w
        target_h = slide_w / img_ratio
        return 0.0, (slide_h - target_h) / 2, target_w, target_h

    target_h = slide_h
    target_w = slide_h * img_ratio
    return (slide_w - target_w) / 2, 0.0, target_w, target_h


def _set_fill_transparency(shape, transparency: int) -> None:
    # python-pptx 没有透明度接口，直接写 <a:alpha>
    solid_fill = shape._element.spPr.find(qn("a:solidFill"))
    color = solid_fill.find(qn("a:srgbClr"))
    alpha = color.makeelement(qn("a:alpha"), {"val": str((100 - transparency) * 1000)})
    color.append(alpha)


def add_text_box(slide_obj, box: TextBox, frame: Tuple[float, float, float, float]) -> None:
    """把一个OCR文本框叠加到页面上"""
    target_x, target_y, target_w, target_h = frame

    rel_w = box.width / 100 * target_w
    rel_h = box.height / 100 * target_h
    rel_x = target_x + box.xmin / 100 * target_w
    rel_y = target_y + box.ymin / 100 * target_h

    font_size = fit_font_size_pt(box.text, rel_w, rel_h)

    textbox = slide_obj.shapes.add_textbox(
        Inches(rel_x),
        Inches(rel_y),
        Inches(max(rel_w, MIN_TEXT_BOX_WIDTH_INCH)),
        Inches(max(rel_h, MIN_TEXT_BOX_HEIGHT_INCH)),
    )
    textbox.fill.solid()
    textbox.fill.fore_color.rgb = _hex_to_rgb(TEXT_FILL_COLOR)
    _set_fill_transparency(textbox, TEXT_FILL_TRANSPARENCY)

    tf = textbox.text_frame
    tf.word_wrap = True
    tf.margin_left = tf.margin_right = tf.margin_top = tf.margin_bottom = 0
    tf.vertical_anchor = MSO_ANCHOR.TOP

    p = tf.paragraphs[0]
    p.text = box.text
    p.alignment = PP_ALIGN.LEFT
    for run in p.runs:
        run.font.size = Pt(font_size)
        run.font.color.rgb = _hex_to_rgb(TEXT_COLOR)


def generate_pptx(slides: Sequence[Slide], save_path: str) -> int:
    """
    生成多页PPTX

    Args:
        slides: 页面列表（状态为 ERROR 的页面会被跳过）
        save_path: 保存路径

    Returns:
        实际写入的页数
    """
    prs = Presentation()
    prs.slide_width = Inches(SLIDE_WIDTH_INCH)
    prs.slide_height = Inches(SLIDE_HEIGHT_INCH)

    valid_slides = [s for s in slides if s.status is not SlideStatus.ERROR]
    skipped = len(slides) - len(valid_slides)
    if skipped:
        logger.warning(f"跳过 {skipped} 个处理失败的页面")

    for page_idx, slide in enumerate(valid_slides):
        logger.info(f"生成第 {page_idx + 1}/{len(valid_slides)} 页...")

        bg_img = slide.background
        if bg_img.mode not in ("RGB", "RGBA"):
            bg_img = bg_img.convert("RGB")
        frame = fit_image_on_slide(*bg_img.size)

        slide_obj = prs.slides.add_slide(prs.slide_layouts[BLANK_LAYOUT_INDEX])

        with temp_file_context(suffix=".png") as temp_bg_path:
            bg_img.save(temp_bg_path, "PNG")
            x, y, w, h = frame
            slide_obj.shapes.add_picture(
                temp_bg_path, Inches(x), Inches(y), width=Inches(w), height=Inches(h)
            )

        for box in slide.ocr_data:
            if box.text:
                add_text_box(slide_obj, box, frame)

    prs.save(save_path)
    logger.info(f"PPT生成成功！共 {len(valid_slides)} 页: {save_path}")
    return len(valid_slides)


def slides_from_images(images: Sequence[Image.Image]) -> list:
    """把处理好的图片包装为待导出的页面"""
    return [Slide(original_image=img, status=SlideStatus.DONE) for img in images]
