"""
Async HTTP client for collaborators (OCR, overlay renderers) calling the
transliteration service.
"""
import logging
import time
from typing import Any, Dict, Optional

import httpx

logger = logging.getLogger(__name__)


class LipiClientError(RuntimeError):
    def __init__(self, status_code: int, detail: Any = None):
        self.status_code = status_code
        self.detail = detail
        super().__init__(f"lipi service error status {status_code}: {detail}")


class LipiClient:
    def __init__(
        self,
        base_url: str,
        client_id: str,
        api_key: str,
        timeout_seconds: float = 5,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.headers = {"X-Client-Id": client_id, "X-API-Key": api_key}
        self.timeout = timeout_seconds
        self.transport = transport

    async def _post(self, path: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        url = f"{self.base_url}{path}"
        start = time.perf_counter()
        async with httpx.AsyncClient(
            timeout=httpx.Timeout(self.timeout), transport=self.transport, headers=self.headers
        ) as client:
            resp = await client.post(url, json=payload)
        latency_ms = (time.perf_counter() - start) * 1000
        if resp.status_code >= 400:
            try:
                detail = resp.json().get("detail")
            except ValueError:
                detail = resp.text
            logger.error("[LIPICLIENT] event=error url=%s status=%s latency_ms=%.2f", url, resp.status_code, latency_ms)
            raise LipiClientError(resp.status_code, detail)
        logger.info("[LIPICLIENT] event=ok url=%s latency_ms=%.2f", url, latency_ms)
        return resp.json()

    async def transliterate(
        self,
        text: str,
        target_script: str,
        source_script: Optional[str] = None,
        ocr_confidence: Optional[float] = None,
        **options: Any,
    ) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"text": text, "target_script": target_script}
        if source_script:
            payload["source_script"] = source_script
        if ocr_confidence is not None:
            payload["ocr_confidence"] = ocr_confidence
        payload.update(options)
        return await self._post("/api/v1/transliterate", payload)

    async def detect(self, text: str) -> Dict[str, Any]:
        return await self._post("/api/v1/detect", {"text": text})

    async def add_correction(self, original: str, corrected: str) -> Dict[str, Any]:
        return await self._post("/api/v1/corrections", {"original": original, "corrected": corrected})

    async def evaluate(
        self, text: str, source_script: str, target_script: str, truth: Optional[str] = None
    ) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"text": text, "source_script": source_script, "target_script": target_script}
        if truth is not None:
            payload["truth"] = truth
        return await self._post("/api/v1/evaluate", payload)
