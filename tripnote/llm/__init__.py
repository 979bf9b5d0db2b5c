"""LLM invocation package.

Structured generation in one call:

  from tripnote.llm import GenerationRequest, OpenRouterClient, StructuredInvoker, StructuredSchema

  invoker = StructuredInvoker(OpenRouterClient())
  plan = await invoker.generate(GenerationRequest(
      system_prompt=system,
      user_prompt=user,
      response_schema=StructuredSchema(TravelPlanContent),
      schema_name="create_travel_plan",
      schema_description="...",
  ))

Architecture:
  schema.py  → schema descriptor (JSON Schema for tools + validation)
  request.py → immutable GenerationRequest
  client.py  → provider HTTP client, forced tool calling, status mapping
  repair.py  → JSON parsing and structural repair of model output
  invoker.py → send-repair-validate loop with bounded retry
  errors.py  → typed error taxonomy
"""

from tripnote.llm.client import LLMTransport, OpenRouterClient, extract_tool_arguments
from tripnote.llm.errors import (
    AuthenticationError,
    BadRequestError,
    ConfigurationError,
    InvalidJSONResponseError,
    LLMError,
    RateLimitError,
    SchemaValidationError,
    ServerError,
)
from tripnote.llm.invoker import (
    RETRYABLE_ERRORS,
    StructuredInvoker,
    is_retryable,
    should_retry,
)
from tripnote.llm.repair import parse_arguments, repair_arguments, repair_document
from tripnote.llm.request import GenerationRequest
from tripnote.llm.schema import StructuredSchema, ValidationIssue, ValidationResult

__all__ = [
    # Client
    "LLMTransport",
    "OpenRouterClient",
    "extract_tool_arguments",
    # Errors
    "LLMError",
    "ConfigurationError",
    "AuthenticationError",
    "BadRequestError",
    "RateLimitError",
    "ServerError",
    "InvalidJSONResponseError",
    "SchemaValidationError",
    # Invoker
    "StructuredInvoker",
    "RETRYABLE_ERRORS",
    "is_retryable",
    "should_retry",
    # Repair
    "parse_arguments",
    "repair_arguments",
    "repair_document",
    # Schema
    "GenerationRequest",
    "StructuredSchema",
    "ValidationIssue",
    "ValidationResult",
]
