import pytest

from text_eraser.core.font_fit import fit_font_size_pt


def test_height_bound():
    # 高度: 0.5in * 72 * 0.75 = 27pt；宽度: 144 / (5 * 0.8) = 36pt
    assert fit_font_size_pt("Hello", 2.0, 0.5) == pytest.approx(27.0)


def test_width_bound():
    # 宽度: 72 / (10 * 0.8) = 9pt
    assert fit_font_size_pt("0123456789", 1.0, 1.0) == pytest.approx(9.0)


def test_short_text_counts_two_characters():
    assert fit_font_size_pt("A", 0.5, 1.0) == pytest.approx(22.5)
    assert fit_font_size_pt("", 0.5, 1.0) == pytest.approx(22.5)


def test_clamped():
    assert fit_font_size_pt("tiny", 0.1, 0.1) == 9
    assert fit_font_size_pt("big", 20.0, 5.0) == 32
    assert fit_font_size_pt("big", 20.0, 5.0, max_pt=40) == 40
