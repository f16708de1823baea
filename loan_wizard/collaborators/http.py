"""HTTP client for the hosted decisioning agents."""

from __future__ import annotations

import json
import logging
from typing import Any

import httpx

from loan_wizard.config import CollaboratorConfig
from loan_wizard.exceptions import CollaboratorError

logger = logging.getLogger(__name__)


class HttpAgentCollaborator:
    """Invoke a hosted agent over HTTP.

    The request object is JSON-encoded into the ``message`` field of the
    invocation body, next to the target ``agent_id``.

    Parameters
    ----------
    agent_id : str
        Agent to invoke.
    config : CollaboratorConfig
        Endpoint, credentials and timeout.
    client : httpx.AsyncClient | None
        Shared client.  When omitted a client is opened per call.
    """

    def __init__(
        self,
        agent_id: str,
        config: CollaboratorConfig | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.agent_id = agent_id
        self.config = config or CollaboratorConfig()
        self._client = client

    @classmethod
    def calculator(
        cls, config: CollaboratorConfig, client: httpx.AsyncClient | None = None
    ) -> "HttpAgentCollaborator":
        """Collaborator for the loan calculation agent."""
        return cls(config.calculator_agent_id, config, client)

    @classmethod
    def processor(
        cls, config: CollaboratorConfig, client: httpx.AsyncClient | None = None
    ) -> "HttpAgentCollaborator":
        """Collaborator for the loan processing agent."""
        return cls(config.processor_agent_id, config, client)

    async def call(self, payload: dict[str, Any]) -> dict[str, Any]:
        """Send ``payload`` to the agent and return its response envelope.

        Raises
        ------
        CollaboratorError
            On connection errors, timeouts, non-2xx statuses, or a body that
            is not a JSON object.
        """
        body = {"message": json.dumps(payload), "agent_id": self.agent_id}
        logger.debug(
            "Invoking agent %s at %s", self.agent_id, self.config.endpoint, extra={"agent_id": self.agent_id}
        )

        try:
            if self._client is not None:
                response = await self._post(self._client, body)
            else:
                async with httpx.AsyncClient(timeout=self.config.timeout_seconds) as client:
                    response = await self._post(client, body)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise CollaboratorError(
                f"Agent {self.agent_id} returned HTTP {exc.response.status_code}"
            ) from exc
        except httpx.HTTPError as exc:
            raise CollaboratorError(f"Agent {self.agent_id} unreachable: {exc}") from exc

        try:
            data = response.json()
        except ValueError as exc:
            raise CollaboratorError(f"Agent {self.agent_id} returned invalid JSON") from exc
        if not isinstance(data, dict):
            raise CollaboratorError(f"Agent {self.agent_id} returned a non-object response")
        return data

    async def _post(self, client: httpx.AsyncClient, body: dict[str, Any]) -> httpx.Response:
        return await client.post(
            self.config.endpoint,
            json=body,
            headers=self.config.headers(),
            timeout=self.config.timeout_seconds,
        )
