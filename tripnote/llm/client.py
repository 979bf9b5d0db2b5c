"""LLM provider client.

All model calls go through an OpenRouter-compatible /chat/completions
endpoint. Structured output uses function calling: the schema is sent as the
single tool's `parameters` and `tool_choice` pins that tool, so a well-behaved
response always carries exactly one tool call whose `arguments` is a JSON
string.

  OpenRouterClient.send(request)   → tool-call arguments string
  OpenRouterClient.complete(...)   → plain text completion

HTTP failures are mapped to the error taxonomy in tripnote.llm.errors:

  401 → AuthenticationError   (body is not inspected)
  400 → BadRequestError       (keeps the body text for diagnosis)
  429 → RateLimitError        (keeps Retry-After when sent)
  other non-2xx, network errors, malformed responses → ServerError

There is no request timeout here. Long itineraries can take minutes and
callers decide the overall deadline.
"""

import os
import time
from typing import Any, Optional, Protocol

import httpx

from tripnote.llm.errors import (
    AuthenticationError,
    BadRequestError,
    ConfigurationError,
    LLMError,
    RateLimitError,
    ServerError,
)
from tripnote.llm.request import GenerationRequest
from tripnote.utils.logging import log, get_logger, truncate

MODULE = "llm.client"
logger = get_logger()

OPENROUTER_URL = os.getenv("OPENROUTER_URL", "https://openrouter.ai/api/v1")
DEFAULT_MODEL = os.getenv("OPENROUTER_MODEL") or "anthropic/claude-3.5-haiku"


class LLMTransport(Protocol):
    """Anything that can turn a GenerationRequest into tool-call arguments.

    OpenRouterClient is the production implementation; tests pass stubs.
    """

    async def send(self, request: GenerationRequest) -> str:
        ...


class OpenRouterClient:
    """HTTP client for the provider's chat-completions endpoint."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        *,
        base_url: Optional[str] = None,
        default_model: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Args:
            api_key: Provider credential. Falls back to OPENROUTER_API_KEY.
            base_url: API root, default OPENROUTER_URL.
            default_model: Used when a request does not name a model.
            transport: Custom httpx transport (tests use httpx.MockTransport).

        Raises:
            ConfigurationError: no credential in the argument or the environment
        """
        self.api_key = api_key or os.getenv("OPENROUTER_API_KEY")
        if not self.api_key:
            log.error(logger, MODULE, "config_failed", "OPENROUTER_API_KEY is not set")
            raise ConfigurationError()

        self.base_url = (base_url or OPENROUTER_URL).rstrip("/")
        self.default_model = default_model or DEFAULT_MODEL
        self._transport = transport

    # -------------------------------------------------------------------------
    # Public API
    # -------------------------------------------------------------------------

    async def send(self, request: GenerationRequest) -> str:
        """Run a forced tool call and return the raw `arguments` JSON string."""
        body = self.build_tool_call_body(request)
        data = await self._post(body, activity=request.schema_name)
        return extract_tool_arguments(data)

    async def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        *,
        model: Optional[str] = None,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
    ) -> str:
        """Plain chat completion, same error mapping as send()."""
        if not system_prompt or not user_prompt:
            raise BadRequestError("system_prompt and user_prompt are required")

        body = _drop_none({
            "model": model or self.default_model,
            "messages": _messages(system_prompt, user_prompt),
            "temperature": temperature,
            "max_tokens": max_tokens,
        })
        data = await self._post(body, activity="complete")
        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as e:
            raise ServerError("Completion response has no message content") from e
        if not isinstance(content, str):
            raise ServerError("Completion response has no message content")
        return content

    def build_tool_call_body(self, request: GenerationRequest) -> dict:
        """Request body forcing exactly one call of the schema's tool."""
        return _drop_none({
            "model": request.model or self.default_model,
            "messages": _messages(request.system_prompt, request.user_prompt),
            "tools": [
                {
                    "type": "function",
                    "function": {
                        "name": request.schema_name,
                        "description": request.schema_description,
                        "parameters": request.response_schema.to_json_schema(),
                    },
                }
            ],
            "tool_choice": {
                "type": "function",
                "function": {"name": request.schema_name},
            },
            "temperature": request.temperature,
            "max_tokens": request.max_tokens,
        })

    # -------------------------------------------------------------------------
    # HTTP
    # -------------------------------------------------------------------------

    async def _post(self, body: dict, activity: str) -> Any:
        url = f"{self.base_url}/chat/completions"
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

        log.debug(logger, MODULE, "request_start", f"Calling LLM provider for {activity}",
                  model=body.get("model"), url=url)
        _t0 = time.monotonic()

        try:
            async with httpx.AsyncClient(timeout=None, transport=self._transport) as client:
                response = await client.post(url, json=body, headers=headers)
                latency_ms = int((time.monotonic() - _t0) * 1000)
                _raise_for_status(response, activity, latency_ms)
                data = response.json()
        except LLMError:
            raise
        except Exception as e:
            # Network failures, DNS, broken 2xx bodies: all surface as unavailable
            log.error(logger, MODULE, "request_failed",
                      f"LLM provider request failed for {activity}",
                      error=str(e), error_type=type(e).__name__)
            raise ServerError(f"LLM provider request failed: {type(e).__name__}") from e

        log.debug(logger, MODULE, "request_done", f"LLM provider responded for {activity}",
                  status_code=response.status_code, latency_ms=latency_ms)
        return data


def _raise_for_status(response: httpx.Response, activity: str, latency_ms: int) -> None:
    status = response.status_code
    if response.is_success:
        return

    if status == 401:
        log.error(logger, MODULE, "auth_failed", "LLM provider rejected the API key",
                  status_code=status, activity=activity)
        raise AuthenticationError()

    if status == 400:
        body = response.text
        log.error(logger, MODULE, "bad_request", "LLM provider rejected the request",
                  status_code=status, activity=activity, body=truncate(body, 500))
        raise BadRequestError(body)

    if status == 429:
        retry_after = response.headers.get("Retry-After")
        log.warning(logger, MODULE, "rate_limited", "LLM provider rate limit hit",
                    status_code=status, activity=activity, retry_after=retry_after)
        raise RateLimitError(retry_after=retry_after)

    log.error(logger, MODULE, "server_error", f"LLM provider returned HTTP {status}",
              status_code=status, activity=activity, latency_ms=latency_ms)
    raise ServerError(f"LLM provider returned HTTP {status}", status_code=status)


def extract_tool_arguments(data: Any) -> str:
    """Pull the single tool call's `arguments` string out of a response.

    Raises:
        ServerError: the response does not contain one function tool call
    """
    try:
        tool_call = data["choices"][0]["message"]["tool_calls"][0]
    except (KeyError, IndexError, TypeError) as e:
        log.error(logger, MODULE, "protocol_error", "Response has no tool call",
                  error=str(e), error_type=type(e).__name__)
        raise ServerError("Expected a tool call in the LLM response") from e

    if not isinstance(tool_call, dict) or tool_call.get("type") != "function":
        log.error(logger, MODULE, "protocol_error", "Tool call is not a function call",
                  tool_call_type=tool_call.get("type") if isinstance(tool_call, dict) else None)
        raise ServerError('Expected a tool call of type "function"')

    function = tool_call.get("function")
    arguments = function.get("arguments") if isinstance(function, dict) else None
    if not isinstance(arguments, str):
        log.error(logger, MODULE, "protocol_error", "Tool call has no arguments string")
        raise ServerError("Tool call has no arguments string")
    return arguments


def _messages(system_prompt: str, user_prompt: str) -> list[dict]:
    return [
        {"role": "system", "content": system_prompt},
        {"role": "user", "content": user_prompt},
    ]


def _drop_none(body: dict) -> dict:
    return {k: v for k, v in body.items() if v is not None}
