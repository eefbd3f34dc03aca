from enum import Enum


class TransliterationError(Exception):
    """Base class for failures the caller has to handle."""


class UnsupportedScript(TransliterationError, ValueError):
    def __init__(self, script):
        self.script = script
        super().__init__(f"Unsupported script: {script!r}")


class Issue(str, Enum):
    """Recoverable conditions, reported on results instead of raised."""

    AMBIGUOUS_DETECTION = "AmbiguousDetection"
    LOW_CONFIDENCE = "LowConfidenceTransliteration"
    MAPPING_GAP = "MappingGap"
