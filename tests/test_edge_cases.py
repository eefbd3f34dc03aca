import pytest

from lipi.edge_cases import (
    convert_numerals,
    estimate_ocr_confidence,
    has_unusual_patterns,
    is_proper_noun,
    normalize_text,
    proper_noun_flags,
    to_ascii_digits,
)
from lipi.phonemes.tables import TABLES
from lipi.scripts.registry import Script


def test_normalize_text_strips_joiners():
    assert normalize_text("क\u200d्\u200cष") == "क्ष"
    assert normalize_text(None) == ""


def test_convert_numerals_devanagari():
    assert convert_numerals("1234", Script.DEVANAGARI) == "१२३४"
    assert convert_numerals("Platform 3", Script.TAMIL) == "Platform ௩"


@pytest.mark.parametrize("script", sorted(TABLES, key=lambda s: s.value))
def test_digit_conversion_total_and_reversible(script):
    native = convert_numerals("0123456789", script)
    assert len(set(native)) == 10
    assert to_ascii_digits(native) == "0123456789"


def test_romanization_gets_ascii_digits():
    assert convert_numerals("१२ ௩", Script.ROMANIZATION) == "12 3"


def test_proper_nouns():
    assert is_proper_noun("Delhi", Script.ROMANIZATION)
    assert not is_proper_noun("delhi", Script.ROMANIZATION)
    assert is_proper_noun("रामपुर", Script.DEVANAGARI)
    assert not is_proper_noun("घर", Script.DEVANAGARI)
    assert proper_noun_flags(["श्री", "राम"], Script.DEVANAGARI) == [False, True]


def test_unusual_patterns():
    assert has_unusual_patterns("कखगघ", Script.DEVANAGARI)
    assert has_unusual_patterns("क््", Script.DEVANAGARI)
    assert not has_unusual_patterns("नमस्ते", Script.DEVANAGARI)


def test_ocr_confidence_adjustments():
    assert estimate_ocr_confidence("नमस्ते", Script.DEVANAGARI, 0.7, known=True) == pytest.approx(0.9)
    assert estimate_ocr_confidence("कखगघ", Script.DEVANAGARI, 0.7) == pytest.approx(0.4)
    assert estimate_ocr_confidence("कखगघ", Script.DEVANAGARI, 0.2) == pytest.approx(0.1)
