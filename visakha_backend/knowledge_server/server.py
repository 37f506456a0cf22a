"""
MCP server for golden knowledge search.

The process owns its own `StoreClient`. Nothing connects until the first tool
call; the connection is closed when the stdio session ends.

Tool failures are reported as tool results flagged as errors, so the calling
agent sees the message instead of a broken transport.
"""

import json
import logging
import sys
from typing import Optional

import anyio.to_thread
from mcp.server.fastmcp import FastMCP

from visakha_backend.database.config.connection_engine import StoreClient
from visakha_backend.database.core.curation import CurationService

logger = logging.getLogger(__name__)

SERVER_NAME = "visakha-knowledge-server"
TOOL_NAME = "search_golden_knowledge"
TOOL_DESCRIPTION = "Search the Golden Knowledge Base for verified answers to user questions. Textual search."
DEFAULT_LIMIT = 3


class KnowledgeSearchError(Exception):
    pass


class KnowledgeSearchTool:
    """
    Backend of the `search_golden_knowledge` tool.

    Parameters
    ----------
    store : StoreClient, optional
        Store to search; defaults to one built from settings on first use.
    """

    def __init__(self, store: Optional[StoreClient] = None):
        self._store = store
        self._curation: Optional[CurationService] = None

    @property
    def curation(self) -> CurationService:
        if self._curation is None:
            if self._store is None:
                self._store = StoreClient.from_settings()
            self._curation = CurationService(self._store)
        return self._curation

    def search(self, query: str, limit: Optional[int] = DEFAULT_LIMIT) -> str:
        """
        JSON list of `{question, answer, tags}` matching `query`.

        Raises
        ------
        KnowledgeSearchError
            Empty query or a store failure.
        """
        if not query or not query.strip():
            raise KnowledgeSearchError("Error searching knowledge base: query is required")
        if not limit or limit < 1:
            limit = DEFAULT_LIMIT
        try:
            hits = self.curation.search_entries(query, limit=limit)
        except Exception as e:
            logger.error("Knowledge search failed for %r: %s", query, e)
            raise KnowledgeSearchError(f"Error searching knowledge base: {e}") from e
        return json.dumps([hit.model_dump() for hit in hits], indent=2, ensure_ascii=False)

    def close(self) -> None:
        if self._store is not None:
            self._store.close()


def build_server(tool: KnowledgeSearchTool) -> FastMCP:
    server = FastMCP(SERVER_NAME)

    @server.tool(name=TOOL_NAME, description=TOOL_DESCRIPTION)
    async def search_golden_knowledge(query: str, limit: int = DEFAULT_LIMIT) -> str:
        # Store calls block; keep them off the stdio loop. Raised errors become `isError` results.
        return await anyio.to_thread.run_sync(tool.search, query, limit)

    return server


def main() -> None:
    # stdout carries the protocol; logs go to stderr.
    logging.basicConfig(level=logging.INFO, stream=sys.stderr)
    tool = KnowledgeSearchTool()
    server = build_server(tool)
    logger.info("Visakha Knowledge MCP Server running on stdio")
    try:
        server.run(transport="stdio")
    finally:
        tool.close()
