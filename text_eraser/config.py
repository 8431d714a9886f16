"""
配置模块 - 配置文件加载和保存
"""

import os
import json
import sys
import logging
from typing import Dict, Any, Optional

from .constants import (
    BASE_FILL_PASSES,
    HEAL_PASSES,
    MASK_BOX_PADDING,
    MASK_SUBTRACT_PASSES,
    NOISE_BOUND,
    OCR_MASK_ALPHA_THRESHOLD,
    PDF_RENDER_SCALE,
    PYRAMID_SCALES,
)

# 配置日志
logger = logging.getLogger(__name__)


# 获取程序运行目录
def get_base_dir():
    if getattr(sys, 'frozen', False):
        # 打包后的exe运行目录
        return os.path.dirname(sys.executable)
    else:
        # 开发环境 - 返回当前包目录
        return os.path.dirname(os.path.abspath(__file__))


# 配置文件路径
CONFIG_FILE = os.path.join(get_base_dir(), "text_eraser_config.json")


def default_config() -> Dict[str, Any]:
    """返回一份新的默认配置"""
    return {
        "pyramid_scales": list(PYRAMID_SCALES),
        "base_fill_passes": BASE_FILL_PASSES,
        "heal_passes": HEAL_PASSES,
        "noise_bound": NOISE_BOUND,
        "noise_monochrome": True,
        "mask_subtract_passes": MASK_SUBTRACT_PASSES,
        "mask_padding": MASK_BOX_PADDING,
        "pdf_render_scale": PDF_RENDER_SCALE,
        "ocr_device": "cpu",
        "ocr_mask_alpha_threshold": OCR_MASK_ALPHA_THRESHOLD,
        "log_level": "INFO",
    }


def load_config(config_file: Optional[str] = None) -> Dict[str, Any]:
    """
    加载配置文件

    Args:
        config_file: 配置文件路径（默认为 CONFIG_FILE）

    Returns:
        配置字典，如果加载失败则返回默认配置
    """
    config_file = config_file or CONFIG_FILE
    defaults = default_config()

    if not os.path.exists(config_file):
        logger.info(f"配置文件不存在，使用默认配置: {config_file}")
        return defaults

    try:
        with open(config_file, 'r', encoding='utf-8') as f:
            config = json.load(f)

        # 验证配置格式
        if not isinstance(config, dict):
            logger.warning("配置文件格式错误，使用默认配置")
            return defaults

        # 合并默认配置
        for key in defaults:
            if key not in config:
                config[key] = defaults[key]

        if not validate_config(config):
            logger.warning("配置文件内容无效，使用默认配置")
            return defaults

        logger.info("配置文件加载成功")
        return config

    except json.JSONDecodeError as e:
        logger.error(f"配置文件JSON解析失败: {e}，使用默认配置")
        return defaults
    except PermissionError as e:
        logger.error(f"无权限读取配置文件: {e}，使用默认配置")
        return defaults
    except OSError as e:
        logger.error(f"读取配置文件时发生系统错误: {e}，使用默认配置")
        return defaults


def save_config(config: Dict[str, Any], config_file: Optional[str] = None) -> bool:
    """
    保存配置到文件

    Args:
        config: 配置字典
        config_file: 配置文件路径（默认为 CONFIG_FILE）

    Returns:
        True表示保存成功，False表示失败
    """
    if not isinstance(config, dict):
        logger.error("配置必须是字典类型")
        return False

    config_file = config_file or CONFIG_FILE
    temp_file = config_file + '.tmp'

    try:
        # 确保目录存在
        config_dir = os.path.dirname(config_file)
        if config_dir and not os.path.exists(config_dir):
            os.makedirs(config_dir, exist_ok=True)

        # 先写入临时文件，成功后再替换（原子操作）
        with open(temp_file, 'w', encoding='utf-8') as f:
            json.dump(config, f, ensure_ascii=False, indent=2)
        os.replace(temp_file, config_file)

        logger.info("配置文件保存成功")
        return True

    except PermissionError as e:
        logger.error(f"无权限写入配置文件: {e}")
        return False
    except OSError as e:
        logger.error(f"保存配置文件时发生系统错误: {e}")
        return False
    finally:
        # 清理临时文件
        if os.path.exists(temp_file):
            try:
                os.remove(temp_file)
            except OSError:
                pass


def validate_config(config: Dict[str, Any]) -> bool:
    """
    验证配置的有效性

    Args:
        config: 配置字典

    Returns:
        True表示配置有效，False表示无效
    """
    # 金字塔比例必须递增，且最后一层为原始分辨率
    scales = config.get("pyramid_scales")
    if not isinstance(scales, (list, tuple)) or not scales:
        logger.warning(f"金字塔比例无效: {scales}")
        return False
    if any(not isinstance(s, (int, float)) or not 0 < s <= 1 for s in scales):
        logger.warning(f"金字塔比例必须在 (0, 1] 之间: {scales}")
        return False
    if list(scales) != sorted(scales) or scales[-1] != 1:
        logger.warning(f"金字塔比例必须从粗到细递增并以 1 结尾: {scales}")
        return False

    # 验证数值范围
    for key in ("base_fill_passes", "heal_passes", "mask_subtract_passes"):
        value = config.get(key)
        if not isinstance(value, int) or isinstance(value, bool) or value < 0:
            logger.warning(f"{key} 无效: {value}")
            return False

    noise_bound = config.get("noise_bound")
    if not isinstance(noise_bound, (int, float)) or not 0 <= noise_bound <= 255:
        logger.warning(f"噪声幅度无效: {noise_bound}")
        return False

    render_scale = config.get("pdf_render_scale")
    if not isinstance(render_scale, (int, float)) or render_scale <= 0:
        logger.warning(f"PDF渲染倍率无效: {render_scale}")
        return False

    # 验证OCR设备选项
    if config.get("ocr_device") not in ["cpu", "gpu"]:
        logger.warning(f"OCR设备选项无效: {config.get('ocr_device')}")
        return False

    return True
