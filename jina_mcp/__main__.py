"""Entry point: ``python -m jina_mcp`` or the ``jina-mcp`` console script."""

from __future__ import annotations

import logging
import sys

from dotenv import load_dotenv

from .errors import ConfigurationError
from .server import build_server
from .settings import load_settings

logger = logging.getLogger("jina_mcp")


def main() -> None:
    load_dotenv()

    # stdout carries the stdio transport, so logs go to stderr
    logging.basicConfig(
        level=logging.INFO,
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        settings = load_settings()
    except ConfigurationError as exc:
        logger.error("Error: %s", exc)
        sys.exit(1)

    logging.getLogger().setLevel(settings.log_level)
    mcp = build_server(settings)
    logger.info("Starting %s (transport=%s)", mcp.name, settings.transport)
    if settings.transport != "stdio":
        logger.info("Listening on http://%s:%d", settings.host, settings.port)
    mcp.run(transport=settings.transport)


if __name__ == "__main__":
    main()
