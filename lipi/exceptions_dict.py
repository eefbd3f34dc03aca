"""
Exception dictionary (place names, signage, honorifics) and the user
correction cache.
"""
import logging
import os
import threading
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from lipi.phonemes.inventory import nfc
from lipi.scripts.registry import Script
from lipi.core.errors import UnsupportedScript


@dataclass
class ExceptionEntry:
    category: str
    forms: Dict[Script, str] = field(default_factory=dict)


def _key(text: str, script: Script) -> str:
    text = nfc(text.strip())
    return text.casefold() if script is Script.ROMANIZATION else text


def load_exceptions(path: str) -> List[ExceptionEntry]:
    entries: List[ExceptionEntry] = []
    if not path or not os.path.exists(path):
        logging.warning("[EXCEPTIONS] dictionary missing at %s", path)
        return entries
    try:
        with open(path, "r", encoding="utf-8") as f:
            for lineno, line in enumerate(f, 1):
                line = line.strip()
                if not line or line.startswith("#"):
                    continue
                if "\t" not in line:
                    continue
                category, *cells = line.split("\t")
                entry = ExceptionEntry(category=category)
                for cell in cells:
                    script, sep, form = cell.partition("=")
                    if not sep or not form:
                        continue
                    try:
                        entry.forms[Script.parse(script)] = nfc(form)
                    except UnsupportedScript:
                        logging.warning("[EXCEPTIONS] line=%d unknown script=%s", lineno, script)
                if len(entry.forms) >= 2:
                    entries.append(entry)
    except (OSError, UnicodeDecodeError) as e:
        logging.error("[EXCEPTIONS] failed to load dictionary: %s", e)
    return entries


class ExceptionDictionary:
    """Exact-match lookups; every form of an entry translates to every other."""

    def __init__(self, entries: Iterable[ExceptionEntry] = ()):
        self.entries: List[ExceptionEntry] = list(entries)
        self._index: Dict[Tuple[Script, str], ExceptionEntry] = {}
        for entry in self.entries:
            for script, form in entry.forms.items():
                self._index.setdefault((script, _key(form, script)), entry)

    @classmethod
    def from_file(cls, path: str) -> "ExceptionDictionary":
        entries = load_exceptions(path)
        logging.info("[EXCEPTIONS] loaded entries=%d path=%s", len(entries), path)
        return cls(entries)

    def __len__(self) -> int:
        return len(self.entries)

    def find(self, text: str, script: Script) -> Optional[ExceptionEntry]:
        if not text:
            return None
        return self._index.get((script, _key(text, script)))

    def contains(self, text: str, script: Script) -> bool:
        return self.find(text, script) is not None

    def lookup(self, text: str, source: Script, target: Script) -> Optional[str]:
        entry = self.find(text, source)
        if entry is None:
            return None
        return entry.forms.get(target)

    def forms_for(self, script: Script) -> List[Tuple[str, ExceptionEntry]]:
        return [(e.forms[script], e) for e in self.entries if script in e.forms]


def load_corrections(path: str) -> Dict[str, str]:
    corrections: Dict[str, str] = {}
    if not path:
        return corrections
    if not os.path.exists(path):
        logging.warning("[CORRECTIONS] file missing at %s", path)
        return corrections
    try:
        with open(path, "r", encoding="utf-8") as f:
            for line in f:
                line = line.rstrip("\n")
                if not line.strip() or line.startswith("#") or "\t" not in line:
                    continue
                original, corrected = line.split("\t", 1)
                if original and corrected:
                    corrections[nfc(original)] = nfc(corrected)
    except (OSError, UnicodeDecodeError) as e:
        logging.error("[CORRECTIONS] failed to load corrections: %s", e)
    return corrections


class CorrectionCache:
    """
    Manual corrections keyed by the exact source string.

    Writers take a short lock; readers go through ``get`` or work on a
    ``snapshot`` copy and never hold the lock while processing.
    """

    def __init__(self, initial: Optional[Mapping[str, str]] = None):
        self._lock = threading.Lock()
        self._store: Dict[str, str] = {nfc(k): nfc(v) for k, v in (initial or {}).items()}

    def add(self, original: str, corrected: str) -> None:
        with self._lock:
            self._store[nfc(original)] = nfc(corrected)

    def get(self, original: str) -> Optional[str]:
        with self._lock:
            return self._store.get(nfc(original))

    def snapshot(self) -> Dict[str, str]:
        with self._lock:
            return dict(self._store)

    def __len__(self) -> int:
        with self._lock:
            return len(self._store)
