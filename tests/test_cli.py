import json
import logging
import os

import fitz
import numpy as np
import pytest
from PIL import Image
from pptx import Presentation

from text_eraser.__main__ import main
from text_eraser.core import ocr as ocr_module
from text_eraser.core.raster import load_mask, load_raster
from text_eraser.textbox import TextBox

from conftest import horizontal_gradient, rect_mask


@pytest.fixture(autouse=True)
def restore_logging():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def config_path(tmp_path):
    return str(tmp_path / "missing_config.json")


@pytest.fixture
def image_path(tmp_path):
    path = tmp_path / "image.png"
    horizontal_gradient(32, 24).to_image().save(path)
    return str(path)


def test_mask_then_inpaint(tmp_path, config_path, image_path):
    mask_path = str(tmp_path / "mask.png")
    out_path = str(tmp_path / "out.png")

    assert main(["--config", config_path, "mask", image_path,
                 "--rect", "4,4,12,10", "-o", mask_path]) == 0
    mask = load_mask(mask_path)
    assert mask.bounding_box() == (4, 4, 12, 10)

    assert main(["--config", config_path, "inpaint", image_path, mask_path,
                 "--mode", "photo", "--seed", "3", "-o", out_path]) == 0
    result = load_raster(out_path)
    source = load_raster(image_path)
    assert result.size == (32, 24)
    assert np.array_equal(result.pixels[mask.keep], source.pixels[mask.keep])


def test_mask_with_brush_and_eraser(tmp_path, config_path, image_path):
    mask_path = str(tmp_path / "mask.png")
    assert main(["--config", config_path, "mask", image_path,
                 "--brush", "2,12,30,12", "--brush-size", "4",
                 "--erase-rect", "0,0,16,24", "-o", mask_path]) == 0
    x0, _, _, _ = load_mask(mask_path).bounding_box()
    assert x0 >= 16


def test_dimension_mismatch_exit_code(tmp_path, config_path, image_path):
    mask_path = str(tmp_path / "mask.png")
    rect_mask(10, 10, 0, 0, 5, 5).to_image().save(mask_path)
    assert main(["--config", config_path, "inpaint", image_path, mask_path,
                 "--mode", "chart", "-o", str(tmp_path / "out.png")]) == 1


def test_unreadable_image_exit_code(tmp_path, config_path):
    missing = str(tmp_path / "nope.png")
    assert main(["--config", config_path, "inpaint", missing, missing,
                 "--mode", "chart", "-o", str(tmp_path / "out.png")]) == 1


@pytest.mark.parametrize("argv", [
    ["inpaint", "a.png", "b.png", "--mode", "blur", "-o", "o.png"],
    ["inpaint", "a.png", "b.png", "-o", "o.png"],
    ["mask", "a.png", "--rect", "1,2,3", "-o", "m.png"],
    ["pdf2img", "a.pdf", "-o", "out", "--scale", "-1"],
    [],
])
def test_usage_errors(argv):
    with pytest.raises(SystemExit) as excinfo:
        main(argv)
    assert excinfo.value.code == 2


def test_export(tmp_path, config_path, image_path):
    out_path = str(tmp_path / "deck.pptx")
    assert main(["--config", config_path, "export", image_path, image_path, "-o", out_path]) == 0
    assert os.path.getsize(out_path) > 0


def test_pdf2img(tmp_path, config_path, capsys):
    doc = fitz.open()
    doc.new_page(width=100, height=50)
    pdf_path = tmp_path / "doc.pdf"
    doc.save(str(pdf_path))
    doc.close()

    out_dir = tmp_path / "pages"
    assert main(["--config", config_path, "pdf2img", str(pdf_path),
                 "-o", str(out_dir), "--scale", "1"]) == 0
    printed = capsys.readouterr().out.split()
    assert len(printed) == 1
    assert Image.open(printed[0]).size == (100, 50)


def write_boxes(path, boxes):
    path.write_text(json.dumps([b.to_dict() for b in boxes], ensure_ascii=False), encoding="utf-8")
    return str(path)


def test_mask_from_regions(tmp_path, config_path, image_path):
    regions = write_boxes(tmp_path / "boxes.json", [TextBox(25, 25, 50, 50, "hi")])
    mask_path = str(tmp_path / "mask.png")
    assert main(["--config", config_path, "mask", image_path,
                 "--regions", regions, "-o", mask_path]) == 0
    # 32x24 图上 25%-50% 为 (8,6)-(16,12)，再外扩 2 像素
    assert load_mask(mask_path).bounding_box() == (6, 4, 18, 14)


def test_export_with_text(tmp_path, config_path, image_path):
    text = write_boxes(tmp_path / "boxes.json", [TextBox(10, 10, 60, 30, "标题")])
    out_path = str(tmp_path / "deck.pptx")
    assert main(["--config", config_path, "export", image_path,
                 "--text", text, "-o", out_path]) == 0

    shapes = Presentation(out_path).slides[0].shapes
    assert [s.text_frame.text for s in shapes if s.has_text_frame] == ["标题"]


def test_export_rejects_extra_text_files(tmp_path, config_path, image_path):
    text = write_boxes(tmp_path / "boxes.json", [])
    assert main(["--config", config_path, "export", image_path,
                 "--text", text, "--text", text, "-o", str(tmp_path / "d.pptx")]) == 1


def test_ocr_without_paddleocr(tmp_path, config_path, image_path, monkeypatch):
    monkeypatch.setattr(ocr_module, "PaddleOCR", None)
    mask_path = str(tmp_path / "mask.png")
    rect_mask(32, 24, 0, 0, 8, 8).to_image().save(mask_path)
    assert main(["--config", config_path, "ocr", image_path, mask_path,
                 "-o", str(tmp_path / "boxes.json")]) == 1
