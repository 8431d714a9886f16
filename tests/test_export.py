import pytest
from pptx import Presentation
from pptx.enum.shapes import MSO_SHAPE_TYPE
from pptx.util import Inches, Pt

from text_eraser.features.export import fit_image_on_slide, generate_pptx, slides_from_images
from text_eraser.slide import Slide, SlideStatus
from text_eraser.textbox import TextBox

from conftest import solid


def test_fit_wide_image():
    x, y, w, h = fit_image_on_slide(3200, 900)
    assert (x, w) == (0.0, 10)
    assert h == pytest.approx(10 * 900 / 3200)
    assert y == pytest.approx((5.625 - h) / 2)


def test_fit_square_image():
    x, y, w, h = fit_image_on_slide(500, 500)
    assert (y, h) == (0.0, 5.625)
    assert w == pytest.approx(5.625)
    assert x == pytest.approx((10 - 5.625) / 2)


def test_fit_rejects_empty_image():
    with pytest.raises(ValueError):
        fit_image_on_slide(0, 10)


def test_generate_pptx(tmp_path):
    image = solid(160, 90, (10, 20, 30, 255)).to_image()
    slides = [
        Slide(original_image=image, status=SlideStatus.DONE,
              ocr_data=[TextBox(10, 10, 60, 20, "季度报告"), TextBox(0, 0, 1, 1, "")]),
        Slide(original_image=image, status=SlideStatus.ERROR),
        Slide(original_image=image, processed_image=image.convert("RGB")),
    ]
    out = tmp_path / "deck.pptx"

    assert generate_pptx(slides, str(out)) == 2

    prs = Presentation(str(out))
    assert prs.slide_width == Inches(10)
    assert prs.slide_height == Inches(5.625)
    assert len(prs.slides) == 2

    first = prs.slides[0]
    pictures = [s for s in first.shapes if s.shape_type == MSO_SHAPE_TYPE.PICTURE]
    boxes = [s for s in first.shapes if s.has_text_frame]
    assert len(pictures) == 1
    assert abs(pictures[0].width - Inches(10)) <= 1
    assert [b.text_frame.text for b in boxes] == ["季度报告"]

    run = boxes[0].text_frame.paragraphs[0].runs[0]
    assert str(run.font.color.rgb) == "333333"
    assert Pt(9) <= run.font.size <= Pt(32)
    assert 'val="30000"' in boxes[0]._element.spPr.xml

    assert len(prs.slides[1].shapes) == 1


def test_small_text_box_uses_minimum_size(tmp_path):
    image = solid(160, 90).to_image()
    slide = Slide(original_image=image, ocr_data=[TextBox(50, 50, 51, 51, "x")])
    out = tmp_path / "small.pptx"
    generate_pptx([slide], str(out))

    box = [s for s in Presentation(str(out)).slides[0].shapes if s.has_text_frame][0]
    assert box.width == Inches(1.0)
    assert box.height == Inches(0.4)


def test_slides_from_images():
    slides = slides_from_images([solid(4, 4).to_image()] * 3)
    assert len(slides) == 3
    assert all(s.status is SlideStatus.DONE for s in slides)
