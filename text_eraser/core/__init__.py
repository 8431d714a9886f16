"""
核心功能模块
- raster: RGBA缓冲区与修复蒙版
- diffusion: 单分辨率色彩扩散填充
- pyramid: 多分辨率分层修复
- texture: 纹理噪声
- font_fit: 导出文本框字号计算
- ocr: OCR文字识别与蒙版过滤
"""

from .raster import HoleMask, RasterBuffer, encode_png, load_mask, load_raster, to_data_url
from .diffusion import DiffusionFiller, FillPolicy, FillStats
from .pyramid import PyramidLevel, PyramidOrchestrator
from .texture import Texturizer
from .font_fit import fit_font_size_pt
from .ocr import TextRecognizer, filter_results_by_mask

__all__ = [
    'RasterBuffer', 'HoleMask', 'load_raster', 'load_mask', 'encode_png', 'to_data_url',
    'DiffusionFiller', 'FillPolicy', 'FillStats',
    'PyramidOrchestrator', 'PyramidLevel',
    'Texturizer',
    'fit_font_size_pt',
    'TextRecognizer', 'filter_results_by_mask',
]
