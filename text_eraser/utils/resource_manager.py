"""
资源管理模块 - 临时文件与输出目录

PaddleOCR 的 predict() 和 python-pptx 的 add_picture() 都更习惯接收文件路径，
所以中间图片先落到临时文件，用完即删。
"""

import logging
import os
import tempfile
from contextlib import contextmanager
from typing import Iterator

logger = logging.getLogger(__name__)


@contextmanager
def temp_file_context(suffix: str = "", prefix: str = "text_eraser_") -> Iterator[str]:
    """
    创建一个已关闭的临时文件，退出上下文时删除

    用法:
        with temp_file_context(suffix='.png') as path:
            image.save(path)
            prs_slide.shapes.add_picture(path, ...)

    Yields:
        临时文件路径
    """
    fd, temp_path = tempfile.mkstemp(suffix=suffix, prefix=prefix)
    os.close(fd)
    logger.debug(f"创建临时文件: {temp_path}")
    try:
        yield temp_path
    finally:
        try:
            os.remove(temp_path)
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning(f"清理临时文件失败 {temp_path}: {e}")


def ensure_dir(path: str) -> bool:
    """创建输出目录（已存在则什么都不做），失败时记录日志并返回 False"""
    if os.path.isdir(path):
        return True
    try:
        os.makedirs(path, exist_ok=True)
    except OSError as e:
        logger.error(f"创建目录失败 {path}: {e}")
        return False
    logger.debug(f"创建目录: {path}")
    return True
