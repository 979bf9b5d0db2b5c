"""Schema descriptors for structured LLM output.

A StructuredSchema wraps a Pydantic model and gives the two views the
pipeline needs:

  to_json_schema() → the tool's `parameters` object for function calling
  validate(doc)    → typed model instance, or a list of ValidationIssue

Pydantic's model_json_schema() puts nested models under `$defs` and points at
them with `$ref`. Several providers reject references inside tool parameters,
so the schema is inlined into one flat object before it goes on the wire.
"""

import copy
from dataclasses import dataclass, field
from typing import Any, Generic, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

T = TypeVar("T", bound=BaseModel)

_REF_PREFIX = "#/$defs/"


@dataclass(frozen=True)
class ValidationIssue:
    """One structural problem found in a candidate document."""

    loc: str
    message: str
    type: str = "value_error"

    def __str__(self) -> str:
        return f"{self.loc or '<root>'}: {self.message}"


@dataclass(frozen=True)
class ValidationResult(Generic[T]):
    """Outcome of StructuredSchema.validate: either a value or issues."""

    value: Optional[T] = None
    issues: list[ValidationIssue] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.value is not None and not self.issues


class StructuredSchema(Generic[T]):
    """Declarative description of a structured document, backed by Pydantic."""

    def __init__(self, model: Type[T]):
        self.model = model

    @property
    def name(self) -> str:
        return self.model.__name__

    def to_json_schema(self) -> dict:
        """JSON Schema suitable for embedding directly as tool `parameters`."""
        raw = self.model.model_json_schema(by_alias=True)
        defs = raw.pop("$defs", {})
        return _inline_refs(raw, defs, ())

    def validate(self, candidate: Any) -> ValidationResult[T]:
        """Validate a repaired document. Never raises on bad input."""
        try:
            value = self.model.model_validate(candidate)
        except ValidationError as e:
            return ValidationResult(issues=issues_from_error(e))
        return ValidationResult(value=value)

    def __repr__(self) -> str:
        return f"StructuredSchema({self.name})"


def issues_from_error(error: ValidationError) -> list[ValidationIssue]:
    """Flatten a Pydantic ValidationError into ValidationIssue records."""
    return [
        ValidationIssue(
            loc=".".join(str(part) for part in err.get("loc", ())),
            message=err.get("msg", ""),
            type=err.get("type", "value_error"),
        )
        for err in error.errors()
    ]


def _inline_refs(node: Any, defs: dict, chain: tuple) -> Any:
    """Replace every `$ref` into `$defs` with a copy of the referenced schema."""
    if isinstance(node, list):
        return [_inline_refs(item, defs, chain) for item in node]
    if not isinstance(node, dict):
        return node

    ref = node.get("$ref")
    if isinstance(ref, str) and ref.startswith(_REF_PREFIX):
        name = ref[len(_REF_PREFIX):]
        if name in chain:
            raise ValueError(f"Recursive schema reference to {name} cannot be inlined")
        if name not in defs:
            raise ValueError(f"Unknown schema reference {ref}")
        resolved = _inline_refs(copy.deepcopy(defs[name]), defs, chain + (name,))
        # Sibling keywords (description, default) override the definition's own
        for key, value in node.items():
            if key != "$ref":
                resolved[key] = _inline_refs(value, defs, chain)
        return resolved

    return {key: _inline_refs(value, defs, chain) for key, value in node.items()}
