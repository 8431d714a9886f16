"""
功能模块
- inpaint: 涂抹擦除（chart / photo 两种修复模式）
- mask: 蒙版生成
- pdf_import: PDF转图片
- export: 导出PPTX
"""

from .inpaint import InpaintMode, InpaintService, perform_inpainting
from .mask import MaskBuilder
from .pdf_import import convert_pdf_to_images, save_pdf_pages
from .export import fit_image_on_slide, generate_pptx, slides_from_images

__all__ = [
    'InpaintMode', 'InpaintService', 'perform_inpainting',
    'MaskBuilder',
    'convert_pdf_to_images', 'save_pdf_pages',
    'fit_image_on_slide', 'generate_pptx', 'slides_from_images',
]
