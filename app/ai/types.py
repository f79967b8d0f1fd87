from typing import Any, Protocol


class JsonGenerator(Protocol):
    """A model endpoint that answers a prompt with schema-constrained JSON text."""

    model: str

    async def generate_json(self, prompt: str, schema: dict[str, Any]) -> str: ...
