"""
异常类型 - 修复流程对调用方暴露的全部错误

所有错误都继承自 InpaintError，调用方可以统一捕获；
修复引擎内部不做任何重试，重试策略由调用方决定。
"""


class InpaintError(Exception):
    """修复流程错误基类"""


class ImageLoadFailure(InpaintError):
    """原图或蒙版无法解码（在任何像素处理开始之前抛出）"""


class SurfaceAllocationFailure(InpaintError):
    """工作缓冲区无法创建，整个调用终止"""


class DimensionMismatch(InpaintError):
    """蒙版与原图尺寸不一致"""

    def __init__(self, image_size, mask_size):
        self.image_size = tuple(image_size)
        self.mask_size = tuple(mask_size)
        super().__init__(
            f"蒙版尺寸 {self.mask_size[0]}x{self.mask_size[1]} "
            f"与图片尺寸 {self.image_size[0]}x{self.image_size[1]} 不一致"
        )


class UnsupportedMode(InpaintError, ValueError):
    """未知的修复模式"""


class InpaintAborted(InpaintError):
    """在两次迭代之间被调用方中止"""
