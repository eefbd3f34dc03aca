from pydantic import BaseModel, Field
from typing import List, Optional


class DetectRequest(BaseModel):
    text: str = Field(..., max_length=2000)


class ScriptScore(BaseModel):
    script: str
    confidence: float = Field(..., ge=0.0, le=1.0)


class DetectResponse(BaseModel):
    script: str
    confidence: float = Field(..., ge=0.0, le=1.0)
    alternatives: List[ScriptScore] = []
    ambiguous: bool = False


class TransliterateRequest(BaseModel):
    text: str = Field(..., max_length=2000)
    source_script: Optional[str] = Field(None, description="Omit to auto-detect")
    target_script: str
    mode: Optional[str] = None
    validate_result: bool = True
    use_exceptions: bool = True
    convert_numerals: bool = True
    ocr_confidence: Optional[float] = Field(None, ge=0.0, le=1.0)


class Validation(BaseModel):
    is_valid: bool
    confidence: float
    suggestions: Optional[List[str]] = None
    similarity: Optional[float] = None
    reversed_text: Optional[str] = None
    skipped: bool = False


class TransliterateResponse(BaseModel):
    result: str
    confidence: float = Field(..., ge=0.0, le=1.0)
    phonemic: str
    validation: Validation
    processing_steps: List[str]
    source_script: str
    target_script: str
    detection: Optional[DetectResponse] = None
    warnings: List[str] = []
    gaps: int = 0


class BatchRequest(BaseModel):
    items: List[TransliterateRequest]


class BatchResponse(BaseModel):
    success: bool = True
    results: List[TransliterateResponse]


class CorrectionRequest(BaseModel):
    original: str = Field(..., min_length=1, max_length=2000)
    corrected: str = Field(..., min_length=1, max_length=2000)


class CorrectionResponse(BaseModel):
    success: bool = True
    corrections: int


class ScriptMetadata(BaseModel):
    id: str
    name: str
    unicode_range: List[int]
    direction: str
    has_conjuncts: bool
    has_matras: bool
    inherent_vowel: str
    virama: str


class EvaluateRequest(BaseModel):
    text: str = Field(..., min_length=1, max_length=2000)
    source_script: str
    target_script: str
    truth: Optional[str] = Field(None, max_length=2000, description="Expected output, if known")


class AccuracyMetrics(BaseModel):
    character_accuracy: float
    akshara_accuracy: float
    word_accuracy: float
    cer: float
    wer: float
    latency_ms: float
    confidence: float


class EvaluateResponse(BaseModel):
    result: str
    confidence: float = Field(..., ge=0.0, le=1.0)
    round_trip: str
    round_trip_accuracy: float
    reference_agreement: Optional[float] = None
    latency_ms: float
    metrics: Optional[AccuracyMetrics] = None
