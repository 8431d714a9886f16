import os

import fitz
import pytest

from text_eraser.features.pdf_import import convert_pdf_to_images, save_pdf_pages


def make_pdf(pages=2):
    doc = fitz.open()
    for i in range(pages):
        page = doc.new_page(width=200, height=100)
        page.insert_text((20, 50), f"Page {i + 1}")
    data = doc.tobytes()
    doc.close()
    return data


def test_convert_from_bytes():
    images = convert_pdf_to_images(make_pdf(2), scale=2.0)
    assert len(images) == 2
    assert all(img.mode == "RGB" for img in images)
    assert images[0].size == (400, 200)


def test_convert_from_path(tmp_path):
    path = tmp_path / "doc.pdf"
    path.write_bytes(make_pdf(1))
    images = convert_pdf_to_images(str(path), scale=1.0)
    assert [img.size for img in images] == [(200, 100)]


def test_save_pages(tmp_path):
    out_dir = tmp_path / "pages"
    paths = save_pdf_pages(make_pdf(3), str(out_dir), scale=1.0)
    assert [os.path.basename(p) for p in paths] == ["page_001.png", "page_002.png", "page_003.png"]
    assert all(os.path.exists(p) for p in paths)


def test_invalid_scale():
    with pytest.raises(ValueError):
        convert_pdf_to_images(make_pdf(1), scale=0)


def test_unreadable_pdf():
    with pytest.raises((RuntimeError, ValueError)):
        convert_pdf_to_images(b"this is not a pdf")
