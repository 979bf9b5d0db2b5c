"""Structured LLM invocation with repair, validation, and bounded retry.

This module is the single entry point for structured generation. Each
attempt runs the full lifecycle:

  1. SEND: forced tool call through the transport
  2. REPAIR: parse the arguments JSON and fix known structural mistakes
  3. VALIDATE: check the repaired document against the schema
  4. RETRY: only on schema validation failure, while attempts remain

Everything except SchemaValidationError propagates on first occurrence.
Authentication, rate limits, bad requests, outages and unparseable JSON
(usually a truncated response) do not fix themselves by asking again.

The default bound is one attempt. Long itineraries take long enough that a
second full generation tends to run into the caller's deadline, so retries
are opt-in via LLM_MAX_ATTEMPTS or the constructor.
"""

import os
import time
from typing import Generic, TypeVar

from pydantic import BaseModel

from tripnote.llm.client import LLMTransport
from tripnote.llm.errors import SchemaValidationError
from tripnote.llm.repair import repair_arguments
from tripnote.llm.request import GenerationRequest
from tripnote.utils.logging import log, get_logger

MODULE = "llm.invoker"
logger = get_logger()

T = TypeVar("T", bound=BaseModel)

LLM_MAX_ATTEMPTS = int(os.getenv("LLM_MAX_ATTEMPTS", "1"))

RETRYABLE_ERRORS: tuple[type[Exception], ...] = (SchemaValidationError,)


def is_retryable(error: Exception) -> bool:
    """Whether a failed attempt may be repeated with the same request."""
    return isinstance(error, RETRYABLE_ERRORS)


def should_retry(error: Exception, attempt: int, max_attempts: int) -> bool:
    """Retry policy: retryable error kind and at least one attempt left.

    Args:
        error: The error raised by the attempt
        attempt: 1-based number of the attempt that just failed
        max_attempts: Total attempts allowed
    """
    return is_retryable(error) and attempt < max_attempts


class StructuredInvoker(Generic[T]):
    """Drives send → repair → validate under a bounded, sequential retry loop."""

    def __init__(self, transport: LLMTransport, max_attempts: int = LLM_MAX_ATTEMPTS):
        if max_attempts < 1:
            raise ValueError(f"max_attempts must be at least 1, got {max_attempts}")
        self.transport = transport
        self.max_attempts = max_attempts

    async def generate(self, request: GenerationRequest) -> T:
        """Return the validated, typed document for `request`.

        Raises:
            SchemaValidationError: the last allowed attempt still failed validation
            LLMError: any other pipeline error, raised on first occurrence
        """
        schema = request.response_schema
        attempt = 0

        while True:
            attempt += 1
            _t0 = time.monotonic()
            try:
                return await self._attempt(request, attempt, _t0)
            except Exception as e:
                if not should_retry(e, attempt, self.max_attempts):
                    log.error(logger, MODULE, "generate_failed",
                              f"Structured generation failed for {request.schema_name}",
                              error=str(e), error_type=type(e).__name__,
                              attempt=attempt, max_attempts=self.max_attempts,
                              schema=schema.name)
                    raise
                log.warning(logger, MODULE, "validation_retry",
                            f"Schema validation failed for {request.schema_name}, retrying",
                            attempt=attempt, max_attempts=self.max_attempts,
                            issues=len(e.issues))

    async def _attempt(self, request: GenerationRequest, attempt: int, started: float) -> T:
        raw = await self.transport.send(request)
        document = repair_arguments(raw)

        result = request.response_schema.validate(document)
        if not result.ok:
            log.warning(logger, MODULE, "validation_failed",
                        f"Schema validation failed for {request.schema_name}",
                        attempt=attempt, issues=len(result.issues),
                        first_issues=[str(issue) for issue in result.issues[:5]])
            raise SchemaValidationError(result.issues, schema_name=request.schema_name)

        log.info(logger, MODULE, "generate_done",
                 f"Structured generation successful for {request.schema_name}",
                 attempts=attempt,
                 latency_ms=int((time.monotonic() - started) * 1000),
                 schema=request.response_schema.name)
        return result.value
