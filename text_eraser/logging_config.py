"""
日志配置模块 - 统一的日志管理

命令行结果写到 stdout，日志一律走 stderr 和按天滚动的日志文件。
"""

import logging
import os
import sys
from datetime import datetime
from typing import Any, Dict, Optional

from .config import get_base_dir

# 第三方库的日志太啰嗦，统一压到 WARNING
THIRD_PARTY_LOGGERS = ('PIL', 'ppocr', 'paddle', 'fitz')

DETAILED_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(filename)s:%(lineno)d - %(message)s'
SIMPLE_FORMAT = '%(asctime)s - %(levelname)s - %(message)s'


def _daily_file_handler(log_dir: str, stem: str, level: int, formatter: logging.Formatter) -> logging.Handler:
    filename = f"{stem}_{datetime.now().strftime('%Y%m%d')}.log"
    handler = logging.FileHandler(os.path.join(log_dir, filename), encoding='utf-8', mode='a')
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def setup_logging(
    log_level: str = "INFO",
    log_to_file: bool = True,
    log_to_console: bool = True,
    log_dir: Optional[str] = None
) -> None:
    """
    配置根日志记录器

    Args:
        log_level: 日志级别 (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_to_file: 是否写入 text_eraser_YYYYMMDD.log（另有只记录错误的 text_eraser_error_YYYYMMDD.log）
        log_to_console: 是否输出到 stderr
        log_dir: 日志目录（默认为包目录下的 logs）
    """
    numeric_level = getattr(logging, str(log_level).upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    root_logger.handlers.clear()

    simple_formatter = logging.Formatter(SIMPLE_FORMAT, datefmt='%H:%M:%S')

    if log_to_console:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(numeric_level)
        console_handler.setFormatter(simple_formatter)
        root_logger.addHandler(console_handler)

    if log_to_file:
        log_dir = log_dir or os.path.join(get_base_dir(), "logs")
        detailed_formatter = logging.Formatter(DETAILED_FORMAT, datefmt='%Y-%m-%d %H:%M:%S')
        try:
            os.makedirs(log_dir, exist_ok=True)
            root_logger.addHandler(
                _daily_file_handler(log_dir, "text_eraser", numeric_level, detailed_formatter)
            )
            root_logger.addHandler(
                _daily_file_handler(log_dir, "text_eraser_error", logging.ERROR, detailed_formatter)
            )
        except OSError as e:
            # 文件不可写时至少保证警告能看到
            if not log_to_console:
                fallback = logging.StreamHandler(sys.stderr)
                fallback.setLevel(logging.WARNING)
                fallback.setFormatter(simple_formatter)
                root_logger.addHandler(fallback)
            logging.warning(f"无法创建日志文件: {e}，仅输出到控制台")

    for name in THIRD_PARTY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.debug(f"日志级别: {log_level}，日志目录: {log_dir if log_to_file else '不记录文件'}")


def setup_logging_from_config(config: Dict[str, Any], **kwargs) -> None:
    """按配置文件中的 log_level 初始化日志，其余参数透传给 setup_logging"""
    setup_logging(log_level=config.get("log_level", "INFO"), **kwargs)


def get_logger(name: str) -> logging.Logger:
    """获取指定名称的日志记录器（通常传 __name__）"""
    return logging.getLogger(name)


class LoggerMixin:
    """
    为类提供 self.logger，名称为 "模块名.类名"

    使用方法:
        class InpaintService(LoggerMixin):
            def inpaint(self, ...):
                self.logger.info("开始修复")
    """

    @property
    def logger(self) -> logging.Logger:
        if not hasattr(self, '_logger'):
            self._logger = logging.getLogger(
                f"{self.__class__.__module__}.{self.__class__.__name__}"
            )
        return self._logger
