from __future__ import annotations

import asyncio
import logging

import openai
from openai import AsyncOpenAI

from core import config

logger = logging.getLogger("app.analysis.llm")


AUTH = "auth"
BAD_REQUEST = "bad_request"
QUOTA = "quota"
NETWORK = "network"

_MESSAGES = {
    AUTH: "Authentication error: check credential configuration (OPENAI_API_KEY).",
    QUOTA: "Rate limit or quota exceeded: check usage limits for the completion service.",
    NETWORK: "Network error: no response received from the completion service (network/connectivity issue).",
}


class CompletionFailure(Exception):
    """Classified failure of one completion call. Converted to a fallback result by the analyzers."""

    def __init__(self, kind: str, message: str, detail: str = ""):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.detail = detail


def _failure(kind: str, detail: str = "") -> CompletionFailure:
    return CompletionFailure(kind, _MESSAGES[kind], detail)


def _upstream_detail(exc: Exception) -> str:
    body = getattr(exc, "body", None)
    if isinstance(body, dict):
        error = body.get("error") if isinstance(body.get("error"), dict) else body
        message = error.get("message")
        if message:
            return str(message)
    return str(getattr(exc, "message", "") or exc or "Unknown error")


def classify_error(exc: Exception) -> CompletionFailure:
    if isinstance(exc, CompletionFailure):
        return exc
    if isinstance(exc, asyncio.TimeoutError):
        return _failure(NETWORK, "timeout")
    if isinstance(exc, (openai.AuthenticationError, openai.PermissionDeniedError)):
        return _failure(AUTH, _upstream_detail(exc))
    if isinstance(exc, openai.RateLimitError):
        return _failure(QUOTA, _upstream_detail(exc))
    if isinstance(exc, openai.APIConnectionError):
        return _failure(NETWORK, str(exc))
    if isinstance(exc, openai.APIStatusError):
        status = int(getattr(exc, "status_code", 0) or 0)
        if status in (401, 403):
            return _failure(AUTH, _upstream_detail(exc))
        if status == 429:
            return _failure(QUOTA, _upstream_detail(exc))
        if 400 <= status < 500:
            detail = _upstream_detail(exc)
            return CompletionFailure(BAD_REQUEST, f"Bad request: {detail}", detail)
        return _failure(NETWORK, f"status={status}")
    return _failure(NETWORK, f"{type(exc).__name__}: {exc}")


class CompletionAdapter:
    """
    Sends one JSON-constrained prompt to an OpenAI-compatible chat completions endpoint.
    Returns the raw message text; every failure surfaces as CompletionFailure.
    """

    def __init__(
        self,
        client=None,
        api_key: str | None = None,
        base_url: str | None = None,
        model: str | None = None,
        timeout_sec: float | None = None,
        retries: int = 1,
    ):
        self._client = client
        self.api_key = config.OPENAI_API_KEY if api_key is None else str(api_key).strip()
        self.base_url = config.OPENAI_BASE_URL if base_url is None else base_url
        self.model = model or config.ANALYSIS_MODEL
        self.timeout_sec = float(timeout_sec or config.COMPLETION_TIMEOUT_SEC)
        self.retries = max(0, int(retries))

    @property
    def client(self):
        if self._client is None:
            if not self.api_key:
                raise _failure(AUTH, "OPENAI_API_KEY is not set")
            # Retries and timeouts are handled here, not by the SDK.
            self._client = AsyncOpenAI(api_key=self.api_key, base_url=self.base_url, max_retries=0)
        return self._client

    async def complete(self, prompt: str, temperature: float, stage: str = "") -> str:
        """
        Return the completion text. `timeout_sec` bounds the whole call,
        retries and back-off included.
        """
        if not str(prompt or "").strip():
            raise CompletionFailure(BAD_REQUEST, "Bad request: empty prompt", "empty prompt")

        client = self.client
        try:
            return await asyncio.wait_for(
                self._complete_with_retries(client, prompt, temperature, stage),
                timeout=self.timeout_sec,
            )
        except asyncio.TimeoutError:
            logger.warning("completion timed out | stage=%s timeout_sec=%s", stage, self.timeout_sec)
            raise _failure(NETWORK, "timeout")

    async def _complete_with_retries(self, client, prompt: str, temperature: float, stage: str) -> str:
        last_failure: CompletionFailure | None = None
        for attempt in range(self.retries + 1):
            try:
                response = await client.chat.completions.create(
                    model=self.model,
                    messages=[{"role": "user", "content": prompt}],
                    temperature=temperature,
                    response_format={"type": "json_object"},
                )
                message = response.choices[0].message.content
                return str(message or "")
            except Exception as exc:
                last_failure = classify_error(exc)
                logger.warning(
                    "completion failure | stage=%s attempt=%s kind=%s detail=%s",
                    stage, attempt + 1, last_failure.kind, last_failure.detail,
                )

            # Only connectivity problems are worth another attempt.
            if last_failure.kind != NETWORK or attempt >= self.retries:
                break
            await asyncio.sleep(0.35 * (attempt + 1))

        raise last_failure
