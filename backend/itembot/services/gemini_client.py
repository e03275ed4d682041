"""
Gemini API Generation Backend

Talks to the Generative Language REST API with httpx:
1. generateContent for one-shot text, chat, image editing and grounded news
2. streamGenerateContent (server-sent events) for streamed text
3. predict (Imagen) for image generation
"""
import json
import logging
from typing import Any, AsyncIterator, Dict, List, Optional

import httpx

from itembot.config import settings
from itembot.models import ChatMessage
from .ai_base import AI_INIT_ERROR, GenerationBackend, GenerationError, ImagePayload, NewsResult

logger = logging.getLogger("uvicorn.error")


def _candidate_parts(payload: Dict[str, Any]) -> List[Dict[str, Any]]:
    candidates = payload.get("candidates") or []
    if not candidates:
        return []
    content = candidates[0].get("content") or {}
    return content.get("parts") or []


def _extract_text(payload: Dict[str, Any]) -> str:
    return "".join(part.get("text", "") for part in _candidate_parts(payload))


class GeminiService(GenerationBackend):
    """Gemini API Generation Backend"""

    def __init__(self):
        self.api_key = settings.gemini_api_key
        self.api_base = settings.gemini_api_base.rstrip("/")
        self.text_model = settings.gemini_text_model
        self.image_model = settings.gemini_image_model
        self.edit_model = settings.gemini_edit_model

    def is_available(self) -> bool:
        """Check if API key is configured"""
        return bool(self.api_key)

    @property
    def name(self) -> str:
        return "Gemini API"

    def _headers(self) -> Dict[str, str]:
        return {
            "x-goog-api-key": self.api_key or "",
            "Content-Type": "application/json",
        }

    def _url(self, model: str, method: str) -> str:
        return f"{self.api_base}/models/{model}:{method}"

    async def _post(self, model: str, method: str, payload: Dict[str, Any], timeout: float = 60) -> Dict[str, Any]:
        if not self.is_available():
            raise GenerationError(AI_INIT_ERROR)
        try:
            async with httpx.AsyncClient(timeout=timeout) as client:
                resp = await client.post(self._url(model, method), headers=self._headers(), json=payload)
                resp.raise_for_status()
                return resp.json()
        except httpx.HTTPStatusError as e:
            logger.error("[gemini] %s:%s returned %s", model, method, e.response.status_code)
            raise GenerationError(f"The AI service returned an error ({e.response.status_code}).") from e
        except httpx.HTTPError as e:
            logger.error("[gemini] %s:%s failed: %s", model, method, e)
            raise GenerationError(f"Could not reach the AI service: {e}") from e
        except ValueError as e:
            raise GenerationError("The AI service returned an unreadable response.") from e

    async def generate_text(self, prompt: str, system_instruction: Optional[str] = None) -> str:
        payload: Dict[str, Any] = {
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
        }
        if system_instruction:
            payload["systemInstruction"] = {"parts": [{"text": system_instruction}]}
        result = await self._post(self.text_model, "generateContent", payload)
        return _extract_text(result)

    async def stream_text(self, prompt: str) -> AsyncIterator[str]:
        """
        Stream text fragments as they arrive.

        Uses `alt=sse`: every `data:` line carries one partial
        GenerateContentResponse.
        """
        if not self.is_available():
            raise GenerationError(AI_INIT_ERROR)
        payload = {
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "generationConfig": {"thinkingConfig": {"thinkingBudget": 0}},
        }
        url = self._url(self.text_model, "streamGenerateContent")
        try:
            async with httpx.AsyncClient(timeout=None) as client:
                async with client.stream(
                    "POST", url, params={"alt": "sse"}, headers=self._headers(), json=payload
                ) as resp:
                    resp.raise_for_status()
                    async for line in resp.aiter_lines():
                        if not line.startswith("data:"):
                            continue
                        data = line[len("data:"):].strip()
                        if not data:
                            continue
                        try:
                            chunk = json.loads(data)
                        except ValueError:
                            logger.warning("[gemini] Skipping unreadable stream event")
                            continue
                        text = _extract_text(chunk)
                        if text:
                            yield text
        except httpx.HTTPStatusError as e:
            raise GenerationError(f"The AI service returned an error ({e.response.status_code}).") from e
        except httpx.HTTPError as e:
            raise GenerationError(f"Could not reach the AI service: {e}") from e

    async def chat(self, history: List[ChatMessage], message: str, system_instruction: Optional[str] = None) -> str:
        contents = [{"role": m.role, "parts": [{"text": m.text}]} for m in history]
        contents.append({"role": "user", "parts": [{"text": message}]})
        payload: Dict[str, Any] = {"contents": contents}
        if system_instruction:
            payload["systemInstruction"] = {"parts": [{"text": system_instruction}]}
        result = await self._post(self.text_model, "generateContent", payload)
        return _extract_text(result)

    async def generate_image(self, prompt: str) -> ImagePayload:
        payload = {
            "instances": [{"prompt": prompt}],
            "parameters": {"sampleCount": 1, "aspectRatio": "1:1", "outputMimeType": "image/jpeg"},
        }
        result = await self._post(self.image_model, "predict", payload, timeout=120)
        predictions = result.get("predictions") or []
        data = predictions[0].get("bytesBase64Encoded") if predictions else None
        if not data:
            raise GenerationError("The model returned no image. The request may have been blocked by safety filters.")
        return ImagePayload(data=data, mime_type=predictions[0].get("mimeType") or "image/jpeg")

    async def edit_image(self, prompt: str, image: ImagePayload) -> ImagePayload:
        payload = {
            "contents": [{
                "role": "user",
                "parts": [
                    {"inlineData": {"mimeType": image.mime_type, "data": image.data}},
                    {"text": f"Based on this image, {prompt}"},
                ],
            }],
            "generationConfig": {"responseModalities": ["IMAGE", "TEXT"]},
        }
        result = await self._post(self.edit_model, "generateContent", payload, timeout=120)
        for part in _candidate_parts(result):
            inline = part.get("inlineData") or {}
            if str(inline.get("mimeType", "")).startswith("image/") and inline.get("data"):
                return ImagePayload(data=inline["data"], mime_type=inline["mimeType"])
        raise GenerationError("The model returned no image. The instruction may not be executable.")

    async def search_news(self, prompt: str) -> NewsResult:
        payload = {
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "tools": [{"google_search": {}}],
        }
        result = await self._post(self.text_model, "generateContent", payload, timeout=90)
        candidates = result.get("candidates") or [{}]
        grounding = candidates[0].get("groundingMetadata") or {}
        sources = []
        for chunk in grounding.get("groundingChunks") or []:
            web = chunk.get("web") or {}
            if web.get("uri"):
                sources.append({"uri": web["uri"], "title": web.get("title")})
        return NewsResult(text=_extract_text(result), sources=sources)


# Global singleton
gemini_service = GeminiService()
