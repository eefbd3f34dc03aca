import pytest

from lipi.core.errors import UnsupportedScript
from lipi.scripts.registry import SCRIPTS, Script, is_char_in_script, require_script, script_info, supported_scripts


def test_parse_accepts_aliases():
    assert Script.parse("hindi") is Script.DEVANAGARI
    assert Script.parse(" Oriya ") is Script.ODIA
    assert Script.parse(Script.TAMIL) is Script.TAMIL


def test_parse_unknown_script_raises():
    with pytest.raises(UnsupportedScript):
        Script.parse("klingon")
    # callers that only know ValueError still catch it
    with pytest.raises(ValueError):
        Script.parse("")


def test_script_info_unknown_returns_none():
    assert script_info("klingon") is None
    assert script_info(None) is None
    with pytest.raises(UnsupportedScript):
        require_script("klingon")


def test_metadata():
    deva = SCRIPTS[Script.DEVANAGARI]
    assert deva.unicode_range == (0x0900, 0x097F)
    assert deva.virama == "्"
    assert deva.has_conjuncts and deva.has_matras
    assert not SCRIPTS[Script.TAMIL].has_conjuncts
    assert SCRIPTS[Script.ROMANIZATION].virama == ""
    assert len(supported_scripts()) == 10


def test_is_char_in_script():
    assert is_char_in_script("क", "devanagari")
    assert not is_char_in_script("a", Script.DEVANAGARI)
    assert is_char_in_script("ṃ", Script.ROMANIZATION)
    assert not is_char_in_script("க", "nope")
