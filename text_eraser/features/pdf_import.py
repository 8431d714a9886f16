"""
PDF导入模块 - 把PDF每一页渲染为图片（PyMuPDF）
"""

from __future__ import annotations

import logging
import os
from io import BytesIO
from typing import List, Union

import fitz  # PyMuPDF
from PIL import Image

from ..constants import PDF_RENDER_SCALE
from ..utils.resource_manager import ensure_dir

logger = logging.getLogger(__name__)


def _open_document(source: Union[str, os.PathLike, bytes]):
    if isinstance(source, (bytes, bytearray)):
        return fitz.open(stream=bytes(source), filetype="pdf")
    return fitz.open(os.fspath(source))


def convert_pdf_to_images(
    source: Union[str, os.PathLike, bytes],
    scale: float = PDF_RENDER_SCALE,
) -> List[Image.Image]:
    """
    渲染PDF所有页面

    Args:
        source: PDF文件路径或字节
        scale: 渲染倍率（PDF默认72 DPI，2.0 即 144 DPI）

    Returns:
        RGB图片列表，顺序与页码一致

    Raises:
        ValueError: PDF为空或倍率无效
        RuntimeError: PDF无法打开
    """
    if scale <= 0:
        raise ValueError(f"渲染倍率必须是正数，得到: {scale}")

    try:
        doc = _open_document(source)
    except (RuntimeError, ValueError, OSError) as e:
        logger.error(f"PDF打开失败: {e}")
        raise RuntimeError(f"无法打开PDF: {e}") from e

    try:
        page_count = len(doc)
        if page_count == 0:
            raise ValueError("PDF文件为空")

        images: List[Image.Image] = []
        matrix = fitz.Matrix(scale, scale)
        for page_num in range(page_count):
            logger.info(f"正在转换第 {page_num + 1}/{page_count} 页...")
            pix = doc[page_num].get_pixmap(matrix=matrix)
            img = Image.open(BytesIO(pix.tobytes("png")))
            images.append(img.convert("RGB"))
    finally:
        doc.close()

    logger.info(f"PDF转换成功！共 {len(images)} 页")
    return images


def save_pdf_pages(
    source: Union[str, os.PathLike, bytes],
    out_dir: str,
    scale: float = PDF_RENDER_SCALE,
    basename: str = "page",
) -> List[str]:
    """
    渲染PDF并逐页保存为PNG

    Returns:
        保存的文件路径列表（{basename}_001.png, ...）
    """
    if not ensure_dir(out_dir):
        raise RuntimeError(f"无法创建输出目录: {out_dir}")

    paths: List[str] = []
    for idx, img in enumerate(convert_pdf_to_images(source, scale), start=1):
        path = os.path.join(out_dir, f"{basename}_{idx:03d}.png")
        img.save(path, "PNG")
        paths.append(path)
    return paths
