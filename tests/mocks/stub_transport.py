"""Deterministic stand-in for the LLM provider."""

import json
from typing import Union

from tripnote.llm.request import GenerationRequest


class StubTransport:
    """Replays queued responses in order. Exceptions in the queue are raised.

    Dict responses are serialized to JSON, strings are returned verbatim
    (use them for malformed arguments).
    """

    def __init__(self, *responses: Union[dict, str, Exception]):
        self.responses = list(responses)
        self.requests: list[GenerationRequest] = []

    @property
    def calls(self) -> int:
        return len(self.requests)

    async def send(self, request: GenerationRequest) -> str:
        self.requests.append(request)
        if not self.responses:
            raise AssertionError("StubTransport called more times than expected")
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        if isinstance(response, dict):
            return json.dumps(response, ensure_ascii=False)
        return response
