"""
允许使用 `python -m text_eraser` 运行命令行。

子命令:
    inpaint IMAGE MASK --mode {chart,photo} -o OUT [--seed N]
    mask IMAGE [--rect x1,y1,x2,y2 ...] [--regions BOXES.json] [--brush-size N] -o OUT
    ocr IMAGE MASK -o BOXES.json
    pdf2img PDF -o DIR [--scale S]
    export IMAGE [IMAGE ...] [--text BOXES.json ...] -o OUT.pptx

退出码: 0 成功，1 处理失败，2 参数错误。
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import List

from PIL import Image

from .config import load_config
from .errors import InpaintError
from .textbox import TextBox
from .logging_config import setup_logging_from_config

logger = logging.getLogger("text_eraser")


def _number_list(value: str, count: int = 0) -> list:
    try:
        numbers = [float(v) for v in value.split(",")]
    except ValueError:
        raise argparse.ArgumentTypeError(f"无效的坐标: {value!r}") from None
    if count and len(numbers) != count:
        raise argparse.ArgumentTypeError(f"需要 {count} 个数字，得到: {value!r}")
    if not count and (len(numbers) < 2 or len(numbers) % 2):
        raise argparse.ArgumentTypeError(f"路径必须是成对的 x,y 坐标: {value!r}")
    return numbers


def _rect(value: str) -> list:
    return _number_list(value, 4)


def _path(value: str) -> list:
    numbers = _number_list(value)
    return list(zip(numbers[0::2], numbers[1::2]))


def _positive_float(value: str) -> float:
    try:
        number = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"无效的数字: {value!r}") from None
    if number <= 0:
        raise argparse.ArgumentTypeError(f"必须是正数: {value!r}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="text_eraser", description="文字擦除与背景修复")
    parser.add_argument("--config", help="配置文件路径（默认使用包目录下的 text_eraser_config.json）")
    parser.add_argument("--log-level", help="日志级别（覆盖配置文件）")
    sub = parser.add_subparsers(dest="command", required=True)

    p_inpaint = sub.add_parser("inpaint", help="修复蒙版标记的区域")
    p_inpaint.add_argument("image")
    p_inpaint.add_argument("mask")
    p_inpaint.add_argument("--mode", required=True, choices=["chart", "photo"])
    p_inpaint.add_argument("-o", "--output", required=True)
    p_inpaint.add_argument("--seed", type=int, default=None, help="纹理噪声的随机种子")

    p_mask = sub.add_parser("mask", help="按矩形/笔画生成蒙版")
    p_mask.add_argument("image", help="用于确定蒙版尺寸的原图")
    p_mask.add_argument("--rect", type=_rect, action="append", default=[], metavar="x1,y1,x2,y2")
    p_mask.add_argument("--brush", type=_path, action="append", default=[], metavar="x,y,x,y,...")
    p_mask.add_argument("--erase-rect", type=_rect, action="append", default=[], metavar="x1,y1,x2,y2")
    p_mask.add_argument("--regions", help="ocr 子命令输出的文字框JSON（百分比坐标）")
    p_mask.add_argument("--brush-size", type=int, default=30)
    p_mask.add_argument("-o", "--output", required=True)

    p_ocr = sub.add_parser("ocr", help="识别涂抹区域内的文字（需要 paddleocr）")
    p_ocr.add_argument("image")
    p_ocr.add_argument("mask")
    p_ocr.add_argument("-o", "--output", required=True, help="输出JSON路径")

    p_pdf = sub.add_parser("pdf2img", help="把PDF每页渲染为PNG")
    p_pdf.add_argument("pdf")
    p_pdf.add_argument("-o", "--output", required=True, help="输出目录")
    p_pdf.add_argument("--scale", type=_positive_float, default=None)

    p_export = sub.add_parser("export", help="把图片导出为PPTX")
    p_export.add_argument("images", nargs="+")
    p_export.add_argument("--text", action="append", default=[], metavar="BOXES.json",
                          help="按顺序对应每张图片的文字框JSON")
    p_export.add_argument("-o", "--output", required=True)

    return parser


def _cmd_inpaint(args, config) -> None:
    from .features.inpaint import InpaintService

    service = InpaintService(config=config, rng=args.seed)
    result = service.inpaint(args.image, args.mask, args.mode)
    result.to_image().save(args.output, "PNG")
    logger.info(f"修复结果已保存: {args.output}")


def _cmd_mask(args, config) -> None:
    from .core.raster import load_raster
    from .features.mask import MaskBuilder

    source = load_raster(args.image)
    builder = MaskBuilder(source.width, source.height, brush_size=args.brush_size)
    for rect in args.rect:
        builder.rect(*rect)
    for points in args.brush:
        builder.brush(points)
    if args.regions:
        regions = [box.to_dict()["box"] for box in _read_boxes(args.regions)]
        builder.add_regions(regions, padding=config["mask_padding"])
    for rect in args.erase_rect:
        builder.erase_rect(*rect)

    mask = builder.build(config["mask_subtract_passes"])
    mask.to_image().save(args.output, "PNG")
    logger.info(f"蒙版已保存: {args.output}（{mask.hole_count()} 个待修复像素）")


def _read_boxes(path: str) -> List[TextBox]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ValueError(f"无法读取文字框文件 {path}: {e}") from e
    if not isinstance(data, list):
        raise ValueError(f"文字框文件必须是列表: {path}")

    boxes = [TextBox.from_dict(item) for item in data]
    return [box for box in boxes if box is not None]


def _cmd_ocr(args, config) -> None:
    from .core.ocr import TextRecognizer
    from .core.raster import load_mask, load_raster

    image = load_raster(args.image)
    mask = load_mask(args.mask)
    boxes = TextRecognizer.from_config(config).recognize_masked(image, mask)

    with open(args.output, "w", encoding="utf-8") as f:
        json.dump([box.to_dict() for box in boxes], f, ensure_ascii=False, indent=2)
    logger.info(f"文字框已保存: {args.output}（{len(boxes)} 条）")


def _cmd_pdf2img(args, config) -> None:
    from .features.pdf_import import save_pdf_pages

    scale = args.scale if args.scale is not None else config["pdf_render_scale"]
    paths = save_pdf_pages(args.pdf, args.output, scale)
    for path in paths:
        print(path)


def _cmd_export(args, config) -> None:
    from .features.export import generate_pptx, slides_from_images

    images = []
    for path in args.images:
        try:
            with Image.open(path) as img:
                images.append(img.convert("RGBA"))
        except OSError as e:
            raise RuntimeError(f"无法打开图片 {path}: {e}") from e
    if len(args.text) > len(images):
        raise ValueError(f"文字框文件数量（{len(args.text)}）多于图片数量（{len(images)}）")

    slides = slides_from_images(images)
    for slide, text_path in zip(slides, args.text):
        slide.ocr_data = _read_boxes(text_path)
    generate_pptx(slides, args.output)


COMMANDS = {
    "inpaint": _cmd_inpaint,
    "mask": _cmd_mask,
    "ocr": _cmd_ocr,
    "pdf2img": _cmd_pdf2img,
    "export": _cmd_export,
}


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    config = load_config(args.config)
    if args.log_level:
        config["log_level"] = args.log_level
    setup_logging_from_config(config, log_to_file=False)

    try:
        COMMANDS[args.command](args, config)
    except InpaintError as e:
        logger.error(f"处理失败: {e}")
        return 1
    except (RuntimeError, ValueError, OSError) as e:
        logger.error(f"{args.command} 失败: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
