from __future__ import annotations

import logging
import time
from typing import Any, Dict, List, Optional, Protocol

import httpx

from edulab.core.config import Settings
from edulab.core.errors import UpstreamError

logger = logging.getLogger("gemini")


class LLMClient(Protocol):
    async def generate(self, prompt: str, temperature: float) -> str: ...


def _malformed() -> UpstreamError:
    return UpstreamError("Gemini returned a malformed response")


def _first_candidate_text(data: Dict[str, Any]) -> str:
    """
    Text of the first candidate. Missing pieces mean "no text" (""), pieces
    of the wrong type mean a malformed response.
    """
    candidates = data.get("candidates")
    if candidates is None:
        return ""
    if not isinstance(candidates, list):
        raise _malformed()
    if not candidates:
        return ""

    first = candidates[0]
    if not isinstance(first, dict):
        raise _malformed()
    content = first.get("content")
    if content is None:
        return ""
    if not isinstance(content, dict):
        raise _malformed()
    parts = content.get("parts")
    if parts is None:
        return ""
    if not isinstance(parts, list):
        raise _malformed()

    texts: List[str] = []
    for p in parts:
        if isinstance(p, dict) and isinstance(p.get("text"), str):
            texts.append(p["text"])
    return "".join(texts).strip()


def _block_reason(data: Dict[str, Any]) -> Any:
    feedback = data.get("promptFeedback")
    return feedback.get("blockReason") if isinstance(feedback, dict) else None


def _error_message(r: httpx.Response) -> str:
    try:
        err = r.json().get("error") or {}
        msg = err.get("message") or err.get("status") or ""
    except (ValueError, AttributeError):
        msg = r.text
    return str(msg)[:500]


class GeminiClient:
    """
    Single-turn client for the Gemini generateContent endpoint.
    The API key is only ever sent as a header.
    """

    def __init__(
        self,
        api_key: str,
        model: str,
        base_url: str,
        timeout_s: float = 60.0,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.model = model
        self.timeout_s = timeout_s
        self._url = f"{base_url.rstrip('/')}/models/{model}:generateContent"
        self._api_key = api_key.strip()
        self._client = http_client or httpx.AsyncClient(
            timeout=httpx.Timeout(timeout_s),
            limits=httpx.Limits(max_connections=20, max_keepalive_connections=20),
        )

    @classmethod
    def from_settings(cls, s: Settings) -> "GeminiClient":
        return cls(
            api_key=s.gemini_api_key,
            model=s.gemini_model,
            base_url=s.gemini_base_url,
            timeout_s=s.gemini_timeout_s,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def generate(self, prompt: str, temperature: float) -> str:
        if not self._api_key:
            raise UpstreamError("No Gemini API key set. Set GEMINI_API_KEY in the env file")

        headers = {"x-goog-api-key": self._api_key, "Content-Type": "application/json"}
        payload: Dict[str, Any] = {
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "generationConfig": {"temperature": temperature},
        }

        t0 = time.perf_counter()
        try:
            r = await self._client.post(self._url, headers=headers, json=payload, timeout=self.timeout_s)
            r.raise_for_status()
            data = r.json()
        except httpx.TimeoutException:
            raise UpstreamError(f"Gemini request timed out after {self.timeout_s}s")
        except httpx.HTTPStatusError as e:
            code = e.response.status_code
            raise UpstreamError(f"Gemini error {code}: {_error_message(e.response)}", status_code=code)
        except httpx.HTTPError as e:
            raise UpstreamError(f"Gemini transport error: {type(e).__name__}: {e}")
        except ValueError:
            raise UpstreamError("Gemini returned a non-JSON response")

        if not isinstance(data, dict):
            raise _malformed()

        text = _first_candidate_text(data)
        logger.info(
            "generate model=%s temperature=%s prompt_chars=%s answer_chars=%s ms=%s",
            self.model,
            temperature,
            len(prompt),
            len(text),
            int((time.perf_counter() - t0) * 1000),
        )
        if not text:
            logger.warning("empty answer model=%s block_reason=%s", self.model, _block_reason(data))
        return text
