"""Request object for a structured generation call."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from tripnote.llm.schema import StructuredSchema


class GenerationRequest(BaseModel):
    """Everything one structured call needs. Built once, never mutated.

    `schema_name` becomes the tool (function) name the model is forced to
    call, so it must be a valid function identifier for the provider.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True, protected_namespaces=())

    system_prompt: str = Field(..., min_length=1)
    user_prompt: str = Field(..., min_length=1)
    response_schema: StructuredSchema = Field(...)
    schema_name: str = Field(..., min_length=1, pattern=r"^[A-Za-z0-9_-]{1,64}$")
    schema_description: str = Field(..., min_length=1)
    model: Optional[str] = None
    temperature: Optional[float] = Field(default=None, ge=0.0, le=2.0)
    max_tokens: Optional[int] = Field(default=None, ge=1)
