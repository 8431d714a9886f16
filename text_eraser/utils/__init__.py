"""
工具模块 - 提供通用辅助函数
"""

from .resource_manager import (
    temp_file_context,
    ensure_dir,
)

__all__ = [
    'temp_file_context',
    'ensure_dir',
]
