from lipi.core.config import settings
from lipi.exceptions_dict import CorrectionCache, ExceptionDictionary, load_corrections, load_exceptions
from lipi.scripts.registry import Script


def test_bundled_dictionary_lookup():
    exceptions = ExceptionDictionary.from_file(settings.EXCEPTIONS_PATH)
    assert len(exceptions) > 10
    assert exceptions.lookup("स्टेशन", Script.DEVANAGARI, Script.TAMIL) == "ஸ்டேஷன்"
    assert exceptions.lookup("station", Script.ROMANIZATION, Script.DEVANAGARI) == "स्टेशन"
    assert exceptions.lookup("Dr.", Script.ROMANIZATION, Script.DEVANAGARI) == "डॉ."
    assert exceptions.lookup("स्टेशन", Script.DEVANAGARI, Script.KANNADA) is None
    assert not exceptions.contains("घर", Script.DEVANAGARI)


def test_missing_file_gives_empty_dictionary(tmp_path):
    assert load_exceptions(str(tmp_path / "missing.tsv")) == []
    assert len(ExceptionDictionary.from_file(str(tmp_path / "missing.tsv"))) == 0


def test_malformed_lines_are_skipped(tmp_path):
    path = tmp_path / "ex.tsv"
    path.write_text(
        "# comment\nno tabs here\nplace\tdevanagari=पटना\tklingon=x\tromanization=Patna\nplace\ttamil=ஒன்று\n",
        encoding="utf-8",
    )
    entries = load_exceptions(str(path))
    assert len(entries) == 1
    assert entries[0].forms == {Script.DEVANAGARI: "पटना", Script.ROMANIZATION: "Patna"}


def test_load_corrections(tmp_path):
    path = tmp_path / "corrections.tsv"
    path.write_text("नमस्ते\tவணக்கம்\n\n# skipped\n", encoding="utf-8")
    assert load_corrections(str(path)) == {"नमस्ते": "வணக்கம்"}
    assert load_corrections("") == {}


def test_correction_cache():
    cache = CorrectionCache({"a": "b"})
    cache.add("नमस्ते", "வணக்கம்")
    assert cache.get("नमस्ते") == "வணக்கம்"
    assert cache.get("missing") is None
    snapshot = cache.snapshot()
    cache.add("x", "y")
    assert "x" not in snapshot
    assert len(cache) == 3
