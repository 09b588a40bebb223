from __future__ import annotations

from typing import Any

import httpx

from helpdesk_bot.utils import get_logger

logger = get_logger(__name__)

SEARCH_API_VERSION = "2016-09-01"


class AzureSearchClient:
    """Queries documents of a hosted search index."""

    def __init__(
        self,
        account: str,
        index: str,
        key: str,
        *,
        timeout: float = 20.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = f"https://{account}.search.windows.net"
        self.index = index
        self.key = key
        self.timeout = timeout
        self._transport = transport

    async def query(self, filter_expression: str) -> dict[str, Any]:
        """Return documents matching an OData ``$filter`` expression.

        Raises ``httpx.HTTPError`` on transport failure or a non-2xx status.
        """
        logger.debug(f"Searching index {self.index} with filter {filter_expression!r}")
        async with httpx.AsyncClient(
            base_url=self.base_url, timeout=self.timeout, transport=self._transport
        ) as client:
            response = await client.get(
                f"/indexes/{self.index}/docs",
                params={"api-version": SEARCH_API_VERSION, "$filter": filter_expression},
                headers={"api-key": self.key, "Accept": "application/json"},
            )
            response.raise_for_status()
            return response.json()
