"""
Jina Search Tools MCP Server

Exposes three tools to MCP clients (e.g. Claude Desktop):

  search(query, count)                         web search, re-ranked per result
  fact-check(statement, deepdive)              grounding verdict + references
  read-webpage(url, query, with_links, ...)    page content, re-ranked by query

Run with:
    python -m jina_mcp                      # stdio
    MCP_TRANSPORT=sse python -m jina_mcp    # → http://127.0.0.1:8000/sse
"""

from __future__ import annotations

from mcp.server.fastmcp import FastMCP

from .settings import Settings
from .tools import Gateway, JinaTools

SERVER_NAME = "jina-search-tools"


def build_server(settings: Settings, gateway: Gateway | None = None) -> FastMCP:
    """Create the FastMCP app with all tools bound to *settings*."""
    tools = JinaTools(settings, gateway)
    mcp = FastMCP(SERVER_NAME, host=settings.host, port=settings.port)

    # -----------------------------------------------------------------------
    # Tool 1: search
    # -----------------------------------------------------------------------

    @mcp.tool(name="search")
    async def search(query: str, count: int = 5) -> str:
        """
        Search the web for information, for example recent information.

        Each result is trimmed to the passages most relevant to the query.

        Args:
            query: The search query to search the web for.
            count: Maximum number of results to return.
        """
        return (await tools.search(query, count)).text

    # -----------------------------------------------------------------------
    # Tool 2: fact-check
    # -----------------------------------------------------------------------

    @mcp.tool(name="fact-check")
    async def fact_check(statement: str, deepdive: bool = False) -> str:
        """
        Verify the accuracy of a statement by checking it against reliable sources.

        Args:
            statement: The statement to verify for factual accuracy.
            deepdive: Spend more time collecting references.
        """
        return (await tools.fact_check(statement, deepdive)).text

    # -----------------------------------------------------------------------
    # Tool 3: read-webpage
    # -----------------------------------------------------------------------

    @mcp.tool(name="read-webpage")
    async def read_webpage(
        url: str,
        query: str,
        with_links: bool = False,
        no_cache: bool = False,
    ) -> str:
        """
        Read a webpage and extract its content.

        Only the parts of the page most relevant to *query* are returned.

        Args:
            url: The URL of the webpage to read.
            query: Query used to select the most relevant parts of the webpage.
            with_links: Append a summary of the links found on the page.
            no_cache: Bypass the reader's page cache.
        """
        return (await tools.read_webpage(url, query, with_links, no_cache)).text

    return mcp
