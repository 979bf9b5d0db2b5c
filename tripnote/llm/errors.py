"""Error taxonomy for LLM calls.

Every failure the pipeline can surface is a subclass of LLMError, so callers
branch on the type instead of matching strings:

  ConfigurationError       → credential missing at construction (fatal)
  AuthenticationError      → provider rejected the credential (HTTP 401)
  BadRequestError          → provider rejected the payload (HTTP 400)
  RateLimitError           → provider throttling (HTTP 429)
  ServerError              → outage, network failure or unexpected protocol shape
  InvalidJSONResponseError → tool-call arguments are not parseable JSON
  SchemaValidationError    → parseable, but does not match the schema

Only SchemaValidationError is retried by the invoker (see invoker.RETRYABLE_ERRORS).
The attributes carry diagnostics for logging. They are not meant to be shown
to end users.
"""

from typing import Optional


class LLMError(Exception):
    """Base class for all LLM pipeline errors."""

    default_message = "LLM request failed"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.default_message)


class ConfigurationError(LLMError):
    default_message = "OPENROUTER_API_KEY is not set"


class AuthenticationError(LLMError):
    default_message = "Invalid or missing API key"
    status_code = 401


class BadRequestError(LLMError):
    default_message = "Provider rejected the request payload"
    status_code = 400

    def __init__(self, body: str = ""):
        super().__init__(body or None)
        self.body = body


class RateLimitError(LLMError):
    default_message = "Provider rate limit exceeded"
    status_code = 429

    def __init__(self, retry_after: Optional[str] = None):
        super().__init__()
        self.retry_after = retry_after


class ServerError(LLMError):
    default_message = "LLM provider is unavailable"

    def __init__(self, message: Optional[str] = None, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class InvalidJSONResponseError(LLMError):
    default_message = "Model returned tool-call arguments that are not valid JSON"

    def __init__(self, raw_output: str):
        super().__init__()
        self.raw_output = raw_output


class SchemaValidationError(LLMError):
    """Repaired document does not satisfy the schema.

    `issues` is the list of ValidationIssue from StructuredSchema.validate.
    """

    def __init__(self, issues: list, schema_name: Optional[str] = None):
        super().__init__(
            f"Schema validation failed for {schema_name or 'document'} "
            f"({len(issues)} issue{'s' if len(issues) != 1 else ''})"
        )
        self.issues = issues
        self.schema_name = schema_name
