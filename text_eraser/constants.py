"""
常量模块 - 蒙版阈值、金字塔参数、幻灯片版式
"""

# === 蒙版约定 ===
HOLE_ALPHA_THRESHOLD = 128        # alpha < 128 为待修复区域
MASK_SUBTRACT_PASSES = 20         # 生成蒙版时重复扣除笔刷覆盖的次数
MASK_STROKE_OPACITY = 0.5         # 笔刷/框选在覆盖层上的不透明度
MASK_BOX_PADDING = 2              # 根据文字区域生成蒙版时的外扩像素

# === 扩散填充 ===
NEIGHBOUR_OFFSETS = (
    (0, -1), (0, 1), (-1, 0), (1, 0),
    (-1, -1), (1, -1), (-1, 1), (1, 1),
)

# === 金字塔 ===
PYRAMID_SCALES = (0.125, 0.25, 0.5, 1.0)
BASE_FILL_PASSES = 50             # 最粗层：填充空洞
HEAL_PASSES = 15                  # 其余层：融合接缝

# === 纹理噪声 ===
NOISE_BOUND = 6

# === OCR ===
OCR_BOX_SCALE = 1000              # OCR 坐标使用 0-1000 归一化
OCR_MASK_ALPHA_THRESHOLD = 50

# === PDF ===
PDF_RENDER_SCALE = 2.0

# === 导出（16:9 版式） ===
SLIDE_WIDTH_INCH = 10
SLIDE_HEIGHT_INCH = 5.625
TEXT_COLOR = "#333333"
TEXT_FILL_COLOR = "#FFFFFF"
TEXT_FILL_TRANSPARENCY = 70       # 百分比
MIN_TEXT_BOX_WIDTH_INCH = 1.0
MIN_TEXT_BOX_HEIGHT_INCH = 0.4
MIN_FONT_PT = 9
MAX_FONT_PT = 32
