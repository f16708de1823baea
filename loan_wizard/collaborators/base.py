"""Call interface shared by the decisioning collaborators."""

from typing import Any, Protocol


class Collaborator(Protocol):
    """An external decisioning agent.

    ``call`` sends one request object and returns the agent's response
    envelope, ``{"success": bool, "response": {"result": ..., "message": ...},
    "error": ...}``.  Transport failures raise instead of returning.
    """

    async def call(self, payload: dict[str, Any]) -> dict[str, Any]:
        ...
