"""
文字擦除与背景修复
==================

在幻灯片截图上涂抹需要去掉的文字，然后用多分辨率色彩扩散把涂抹区域补齐，
不依赖任何外部模型。

目录结构:
---------
text_eraser/
├── __init__.py           # 包入口
├── __main__.py           # 命令行入口
├── config.py             # 配置管理
├── constants.py          # 算法与导出常量
├── errors.py             # 错误类型
├── logging_config.py     # 日志配置
├── textbox.py            # TextBox数据类
├── slide.py              # Slide数据类
├── core/                 # 核心算法
│   ├── raster.py        # RGBA缓冲区 / 修复蒙版
│   ├── diffusion.py     # 色彩扩散填充
│   ├── pyramid.py       # 分层修复
│   ├── texture.py       # 纹理噪声
│   ├── font_fit.py      # 字号计算
│   └── ocr.py           # OCR识别与蒙版过滤
├── features/             # 功能模块
│   ├── inpaint.py       # 修复入口
│   ├── mask.py          # 蒙版生成
│   ├── pdf_import.py    # PDF转图片
│   └── export.py        # 导出PPTX
└── utils/
    └── resource_manager.py

使用方法:
---------
方式1: 命令行
    python -m text_eraser inpaint slide.png mask.png --mode photo -o out.png

方式2: 作为模块导入
    from text_eraser import InpaintService
    result = InpaintService(rng=0).inpaint("slide.png", "mask.png", "chart")
    result.to_image().save("out.png")

依赖库:
-------
必需:
- numpy
- Pillow (PIL)
- opencv-python (cv2)
- python-pptx
- PyMuPDF (fitz)

可选:
- paddleocr - 文字识别

注意事项:
---------
1. 蒙版 alpha < 128 的像素为待修复区域
2. 配置文件保存在包目录的 text_eraser_config.json
3. 日志保存在包目录的 logs/
"""

# 版本信息
__version__ = '1.0.0'

from .config import load_config, save_config, get_base_dir
from .errors import (
    DimensionMismatch,
    ImageLoadFailure,
    InpaintAborted,
    InpaintError,
    SurfaceAllocationFailure,
    UnsupportedMode,
)
from .core import (
    DiffusionFiller,
    FillPolicy,
    FillStats,
    HoleMask,
    PyramidOrchestrator,
    RasterBuffer,
    Texturizer,
)
from .features import InpaintMode, InpaintService, MaskBuilder, perform_inpainting
from .textbox import TextBox
from .slide import Slide, SlideStatus

# 导出列表
__all__ = [
    # 修复入口
    'InpaintService',
    'InpaintMode',
    'perform_inpainting',
    'MaskBuilder',
    # 核心算法
    'RasterBuffer',
    'HoleMask',
    'DiffusionFiller',
    'FillPolicy',
    'FillStats',
    'PyramidOrchestrator',
    'Texturizer',
    # 数据类
    'TextBox',
    'Slide',
    'SlideStatus',
    # 错误
    'InpaintError',
    'ImageLoadFailure',
    'SurfaceAllocationFailure',
    'DimensionMismatch',
    'UnsupportedMode',
    'InpaintAborted',
    # 配置
    'load_config',
    'save_config',
    'get_base_dir',
]
