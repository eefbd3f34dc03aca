import logging
from typing import List
from fastapi import APIRouter, HTTPException, Request, Response
from lipi.api.schemas import (
    BatchRequest,
    BatchResponse,
    CorrectionRequest,
    CorrectionResponse,
    DetectRequest,
    DetectResponse,
    EvaluateRequest,
    EvaluateResponse,
    ScriptMetadata,
    TransliterateRequest,
    TransliterateResponse,
)
from lipi.core.config import settings
from lipi.scripts.registry import Script
from lipi.services.quality import QualityEvaluator
from lipi.services.transliteration import TransliterationPipeline, get_pipeline_status

router = APIRouter()
health_router = APIRouter()
pipeline = TransliterationPipeline.from_settings()
evaluator = QualityEvaluator(pipeline)


def _check_length(text: str) -> None:
    if len(text) > settings.MAX_TEXT_LEN:
        raise HTTPException(status_code=413, detail=f"text exceeds {settings.MAX_TEXT_LEN} characters")


def _run(req: TransliterateRequest, rid: str):
    _check_length(req.text)
    try:
        return pipeline.transliterate_cached(
            req.text,
            source=req.source_script,
            target=req.target_script,
            mode=req.mode,
            validate_result=req.validate_result,
            use_exceptions=req.use_exceptions,
            convert_numerals=req.convert_numerals,
            ocr_confidence=req.ocr_confidence,
            request_id=rid,
        )
    except ValueError as e:
        # UnsupportedScript and unknown orthography modes
        logging.warning("transliteration_rejected request_id=%s error=%s", rid, e)
        raise HTTPException(status_code=400, detail=str(e))


@health_router.get("/health")
async def health():
    return {"ok": True, **get_pipeline_status(pipeline)}


@router.get("/scripts", response_model=List[ScriptMetadata])
async def scripts():
    return [
        ScriptMetadata(
            id=info.script.value,
            name=info.name,
            unicode_range=list(info.unicode_range),
            direction=info.direction,
            has_conjuncts=info.has_conjuncts,
            has_matras=info.has_matras,
            inherent_vowel=info.inherent_vowel,
            virama=info.virama,
        )
        for info in pipeline.supported_scripts()
    ]


@router.post("/detect", response_model=DetectResponse)
async def detect(req: DetectRequest):
    detection = pipeline.detect(req.text)
    return DetectResponse(
        script=detection.script.value,
        confidence=round(detection.confidence, 4),
        alternatives=[{"script": s.value, "confidence": c} for s, c in detection.alternatives],
        ambiguous=detection.ambiguous,
    )


@router.post("/transliterate", response_model=TransliterateResponse)
async def transliterate(req: TransliterateRequest, request: Request, response: Response):
    rid = getattr(request.state, "request_id", "n/a")
    result, cache_status = _run(req, rid)
    response.headers["X-Lipi-Cache"] = cache_status
    return result.to_dict()


@router.post("/transliterate/batch", response_model=BatchResponse)
async def transliterate_batch(req: BatchRequest, request: Request):
    rid = getattr(request.state, "request_id", "n/a")
    if len(req.items) > settings.MAX_BATCH_SIZE:
        raise HTTPException(status_code=413, detail=f"batch exceeds {settings.MAX_BATCH_SIZE} items")
    results = [_run(item, rid)[0].to_dict() for item in req.items]
    logging.info("batch_done request_id=%s items=%d", rid, len(results))
    return BatchResponse(success=True, results=results)


@router.post("/corrections", response_model=CorrectionResponse, status_code=201)
async def add_correction(req: CorrectionRequest, request: Request):
    rid = getattr(request.state, "request_id", "n/a")
    pipeline.add_user_correction(req.original, req.corrected)
    logging.info("correction_stored request_id=%s", rid)
    return CorrectionResponse(success=True, corrections=len(pipeline.corrections))


@router.post("/evaluate", response_model=EvaluateResponse)
async def evaluate(req: EvaluateRequest, request: Request):
    rid = getattr(request.state, "request_id", "n/a")
    _check_length(req.text)
    try:
        source = Script.parse(req.source_script)
        target = Script.parse(req.target_script)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    report = evaluator.report(req.text, source, target, truth=req.truth)
    logging.info(
        "evaluation_done request_id=%s source=%s target=%s reference=%s",
        rid,
        source.value,
        target.value,
        report["reference_agreement"],
    )
    return report
