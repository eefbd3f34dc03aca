import logging
import re
from dataclasses import asdict, dataclass, field, replace
from typing import Dict, List, Optional, Tuple, Union

from lipi.core.cache import LRUCache, make_cache_key
from lipi.core.config import settings
from lipi.core.errors import Issue
from lipi.edge_cases import (
    convert_numerals as convert_numerals_to,
    estimate_ocr_confidence,
    normalize_text,
    proper_noun_flags,
)
from lipi.exceptions_dict import CorrectionCache, ExceptionDictionary, load_corrections
from lipi.orthography.engine import READABLE, OrthographyEngine, OrthographyOptions
from lipi.phonemes.codec import read, render, serialize, to_phonemic
from lipi.scripts.detector import Detection, classify_char, detect, segment_runs
from lipi.scripts.registry import SCRIPTS, Script, ScriptInfo
from lipi.validation import ValidationEngine, ValidationResult

ScriptId = Union[Script, str]

_WHITESPACE = re.compile(r"(\s+)")
_PUNCT = ".,;:!?।॥()\"'"


@dataclass
class TransliterationResult:
    result: str
    confidence: float
    phonemic: str
    validation: ValidationResult
    processing_steps: List[str]
    source_script: Script
    target_script: Script
    detection: Optional[Detection] = None
    warnings: List[str] = field(default_factory=list)
    gaps: int = 0

    def to_dict(self) -> dict:
        data = asdict(self)
        data["source_script"] = self.source_script.value
        data["target_script"] = self.target_script.value
        if self.detection is not None:
            data["detection"] = {
                "script": self.detection.script.value,
                "confidence": round(self.detection.confidence, 4),
                "alternatives": [
                    {"script": s.value, "confidence": c} for s, c in self.detection.alternatives
                ],
                "ambiguous": self.detection.ambiguous,
            }
        return data


@dataclass
class _RunOutput:
    text: str
    phonemic: str
    gaps: int = 0
    phonemes: int = 0
    conjuncts: List[str] = field(default_factory=list)
    exception_hits: int = 0


def _split_punct(word: str) -> Tuple[str, str, str]:
    core = word.strip(_PUNCT)
    if not core:
        return word, "", ""
    start = word.index(core)
    return word[:start], core, word[start + len(core):]


def _written_in(text: str, script: Script) -> bool:
    scripts = {classify_char(ch) for ch in text} - {None}
    return scripts <= {script}


class TransliterationPipeline:
    """
    Script -> phonemes -> script conversion with orthography rules,
    exception lookups and round-trip validation.

    One instance is built per process; the tables it reads are immutable,
    the correction cache is the only state shared between calls.
    """

    def __init__(
        self,
        exceptions: Optional[ExceptionDictionary] = None,
        corrections: Optional[CorrectionCache] = None,
        options: Optional[OrthographyOptions] = None,
        cache: Optional[LRUCache] = None,
    ):
        self.exceptions = exceptions if exceptions is not None else ExceptionDictionary()
        self.corrections = corrections if corrections is not None else CorrectionCache()
        self.options = options if options is not None else OrthographyOptions()
        self.engine = OrthographyEngine(self.options)
        if cache is None:
            cache = LRUCache(max_size=settings.CACHE_MAX_SIZE, default_ttl=settings.CACHE_TTL_SECONDS)
        self.cache = cache
        self.validator = ValidationEngine(
            self._reverse,
            exceptions=self.exceptions,
            corrections=self.corrections,
            threshold=settings.VALIDATION_THRESHOLD,
            max_length=settings.MAX_VALIDATION_LEN,
        )

    @classmethod
    def from_settings(cls) -> "TransliterationPipeline":
        exceptions = ExceptionDictionary.from_file(settings.EXCEPTIONS_PATH)
        corrections = CorrectionCache(load_corrections(settings.CORRECTIONS_PATH))
        options = OrthographyOptions(mode=settings.DEFAULT_MODE)
        logging.info(
            "pipeline_ready exceptions=%d corrections=%d mode=%s",
            len(exceptions),
            len(corrections),
            options.mode,
        )
        return cls(exceptions=exceptions, corrections=corrections, options=options)

    # configuration

    def supported_scripts(self) -> List[ScriptInfo]:
        return list(SCRIPTS.values())

    def set_orthography_options(
        self,
        mode: Optional[str] = None,
        schwa_handling: Optional[bool] = None,
        conjunct_resolution: Optional[bool] = None,
        nasal_assimilation: Optional[bool] = None,
    ) -> OrthographyOptions:
        changes = {}
        if mode is not None:
            changes["mode"] = mode
        if schwa_handling is not None:
            changes["schwa_handling"] = schwa_handling
        if conjunct_resolution is not None:
            changes["conjunct_resolution"] = conjunct_resolution
        if nasal_assimilation is not None:
            changes["nasal_assimilation"] = nasal_assimilation
        self.options = replace(self.options, **changes)
        self.engine = OrthographyEngine(self.options)
        self.cache.clear()
        logging.info(
            "orthography_options mode=%s schwa=%s conjuncts=%s nasals=%s",
            self.options.mode,
            self.options.schwa_handling,
            self.options.conjunct_resolution,
            self.options.nasal_assimilation,
        )
        return self.options

    def add_user_correction(self, original: str, corrected: str) -> None:
        self.corrections.add(normalize_text(original), normalize_text(corrected))
        # cached results may predate the correction
        self.cache.clear()
        logging.info("user_correction_added entries=%d", len(self.corrections))

    def detect(self, text: str) -> Detection:
        return detect(
            normalize_text(text),
            threshold=settings.DETECTION_THRESHOLD,
            fallback=Script.parse(settings.FALLBACK_SCRIPT),
        )

    # conversion

    def transliterate(
        self,
        text: str,
        source: Optional[ScriptId] = None,
        target: ScriptId = Script.ROMANIZATION,
        mode: Optional[str] = None,
        validate_result: bool = True,
        use_exceptions: bool = True,
        convert_numerals: bool = True,
        ocr_confidence: Optional[float] = None,
        request_id: str = "n/a",
    ) -> TransliterationResult:
        target = Script.parse(target)
        source = Script.parse(source) if source is not None else None
        engine = self.engine
        if mode is not None and mode != self.options.mode:
            engine = OrthographyEngine(replace(self.options, mode=mode))

        logging.info(
            "transliteration_start request_id=%s source=%s target=%s len=%d",
            request_id,
            source.value if source else "auto",
            target.value,
            len(text or ""),
        )
        steps = ["Text normalization"]
        text = normalize_text(text)
        if not text.strip():
            return TransliterationResult(
                result=text,
                confidence=0.0,
                phonemic="",
                validation=ValidationResult(is_valid=True, confidence=0.0, skipped=True),
                processing_steps=steps,
                source_script=source or Script.parse(settings.FALLBACK_SCRIPT),
                target_script=target,
            )

        warnings: List[str] = []
        detection = None
        if source is None:
            detection = self.detect(text)
            source = detection.script
            steps.append(f"Script detection: {source.value} ({detection.confidence:.2f})")
            if detection.ambiguous:
                warnings.append(Issue.AMBIGUOUS_DETECTION.value)

        corrected = self.corrections.get(text)
        if corrected and _written_in(corrected, target):
            steps.append("User correction")
            logging.info("transliteration_correction request_id=%s", request_id)
            return TransliterationResult(
                result=corrected,
                confidence=1.0,
                phonemic=to_phonemic(text, source),
                validation=ValidationResult(is_valid=True, confidence=1.0),
                processing_steps=steps,
                source_script=source,
                target_script=target,
                detection=detection,
                warnings=warnings,
            )

        if use_exceptions:
            hit = self.exceptions.lookup(text, source, target)
            if hit:
                steps.append("Exception dictionary lookup")
                logging.info("transliteration_exception_hit request_id=%s", request_id)
                return TransliterationResult(
                    result=hit,
                    confidence=1.0,
                    phonemic=to_phonemic(text, source),
                    validation=ValidationResult(is_valid=True, confidence=1.0),
                    processing_steps=steps,
                    source_script=source,
                    target_script=target,
                    detection=detection,
                    warnings=warnings,
                )

        runs = segment_runs(text)
        mixed = len(runs) > 1
        mismatch = False
        if mixed:
            steps.append("Mixed-script segmentation: " + ",".join(s.value for s, _ in runs))
        else:
            observed = runs[0][0] if runs else None
            if detection is None and observed is not None and observed is not source:
                # nothing in the text is written in the tagged script
                mismatch = True
                detection = self.detect(text)
                warnings.append(Issue.AMBIGUOUS_DETECTION.value)
                steps.append(f"Source tag mismatch: text reads as {observed.value}")
                logging.warning(
                    "source_tag_mismatch request_id=%s tagged=%s observed=%s",
                    request_id,
                    source.value,
                    observed.value,
                )
            runs = [(source, text)]
        runs = [(s, engine.place_matras(chunk, s or source)) for s, chunk in runs]
        text = "".join(chunk for _, chunk in runs)
        steps.append("Matra placement")

        pieces: List[str] = []
        phonemic: List[str] = []
        gaps = phonemes = hits = 0
        conjuncts: List[str] = []
        for run_script, chunk in runs:
            run_script = run_script or source
            if run_script is target:
                pieces.append(chunk)
                phonemic.append(to_phonemic(chunk, run_script))
                continue
            out = self._convert_run(chunk, run_script, target, engine, use_exceptions)
            pieces.append(out.text)
            phonemic.append(out.phonemic)
            gaps += out.gaps
            phonemes += out.phonemes
            hits += out.exception_hits
            conjuncts.extend(out.conjuncts)
        steps.append("Phonemic conversion")
        if engine.options.mode == READABLE and engine.options.schwa_handling:
            steps.append("Schwa processing")
        if conjuncts:
            steps.append("Conjunct resolution: " + ",".join(conjuncts))
        if hits:
            steps.append(f"Exception dictionary lookup: {hits} word(s)")
        steps.append("Target rendering")
        steps.append("Script nuances")

        result = "".join(pieces)
        if convert_numerals:
            result = convert_numerals_to(result, target)
            steps.append("Numeral conversion")

        if gaps:
            warnings.append(Issue.MAPPING_GAP.value)
            logging.info("mapping_gaps request_id=%s gaps=%d phonemes=%d", request_id, gaps, phonemes)
        gap_confidence = 1.0 - 0.5 * (gaps / phonemes) if phonemes else 1.0

        if validate_result and not mixed and source is not target:
            validation = self.validator.validate_round_trip(text, result, source, target, mode=engine.options.mode)
            confidence = validation.confidence
            steps.append("Round-trip validation")
            if not validation.is_valid:
                warnings.append(Issue.LOW_CONFIDENCE.value)
        else:
            validation = ValidationResult(is_valid=True, confidence=gap_confidence, skipped=True)
            confidence = gap_confidence

        if mismatch:
            confidence = 0.0
        elif detection is not None and not mixed:
            confidence *= detection.confidence
        if ocr_confidence is not None:
            known = self.exceptions.contains(text, source)
            confidence *= estimate_ocr_confidence(text, source, ocr_confidence, known=known)
            steps.append("OCR confidence blending")

        confidence = round(max(0.0, min(1.0, confidence)), 4)
        logging.info(
            "transliteration_done request_id=%s source=%s target=%s confidence=%.3f valid=%s",
            request_id,
            source.value,
            target.value,
            confidence,
            validation.is_valid,
        )
        return TransliterationResult(
            result=result,
            confidence=confidence,
            phonemic="".join(phonemic),
            validation=validation,
            processing_steps=steps,
            source_script=source,
            target_script=target,
            detection=detection,
            warnings=warnings,
            gaps=gaps,
        )

    def transliterate_cached(self, text: str, **kwargs) -> Tuple[TransliterationResult, str]:
        request_id = kwargs.pop("request_id", "n/a")
        key = make_cache_key(
            text,
            *(f"{k}={kwargs[k]}" for k in sorted(kwargs)),
            f"mode_default={self.options.mode}",
        )
        cached = self.cache.get(key)
        if cached is not None:
            logging.info("transliteration_cache_hit request_id=%s", request_id)
            return cached, "hit"
        result = self.transliterate(text, request_id=request_id, **kwargs)
        self.cache.set(key, result)
        return result, "miss"

    def batch_transliterate(
        self,
        texts: List[str],
        source: Optional[ScriptId] = None,
        target: ScriptId = Script.ROMANIZATION,
        **options,
    ) -> List[TransliterationResult]:
        """Items are independent; they run one after another in input order."""
        target = Script.parse(target)
        source = Script.parse(source) if source is not None else None
        return [self.transliterate(text, source, target, **options) for text in texts]

    def _convert_run(
        self,
        chunk: str,
        source: Script,
        target: Script,
        engine: OrthographyEngine,
        use_exceptions: bool,
    ) -> _RunOutput:
        parts = _WHITESPACE.split(chunk)
        words = [p for p in parts if p and not p.isspace()]
        flags = iter(proper_noun_flags(words, source))
        out = _RunOutput(text="", phonemic="")
        rendered: List[str] = []
        phonemic: List[str] = []
        for part in parts:
            if not part:
                continue
            if part.isspace():
                rendered.append(part)
                phonemic.append(part)
                continue
            protected = next(flags)
            lead, core, trail = _split_punct(part)
            hit = None
            if use_exceptions:
                # abbreviations carry their own full stop
                hit = self.exceptions.lookup(part, source, target)
                if hit:
                    lead, trail = "", ""
                elif core:
                    hit = self.exceptions.lookup(core, source, target)
            if hit:
                out.exception_hits += 1
                rendered.append(lead + hit + trail)
                phonemic.append(to_phonemic(part, source))
                continue

            tokens = read(part, source)
            if protected:
                tokens = [replace(t, protected=True) for t in tokens]
            tokens = engine.delete_schwa(tokens, source)
            tokens = engine.resolve_nasals(tokens, target)
            tokens, found = engine.resolve_conjuncts(tokens, target)
            out.conjuncts.extend(found)
            phonemic.append(serialize(tokens))
            word = render(tokens, target)
            out.gaps += word.gaps
            out.phonemes += word.phonemes
            rendered.append(word.text)

        text = engine.normalize_diacritics("".join(rendered), target)
        out.text = engine.apply_nuances(text, target)
        out.phonemic = "".join(phonemic)
        return out

    def _reverse(self, text: str, source: Script, target: Script, mode: Optional[str] = None) -> str:
        return self.transliterate(
            text, source, target, mode=mode, validate_result=False, convert_numerals=True
        ).result


def get_pipeline_status(pipeline: TransliterationPipeline) -> Dict[str, object]:
    stats = pipeline.cache.stats()
    return {
        "scripts": len(SCRIPTS),
        "exceptions": len(pipeline.exceptions),
        "corrections": len(pipeline.corrections),
        "mode": pipeline.options.mode,
        "cache_size": stats["size"],
        "cache_hits": stats["hits"],
        "cache_misses": stats["misses"],
    }
