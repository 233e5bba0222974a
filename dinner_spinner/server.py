from __future__ import annotations

import logging

import uvicorn

from .app import create_app
from .config import DEFAULT_APP_CONFIG

logger = logging.getLogger(__name__)


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    config = DEFAULT_APP_CONFIG
    logger.info("Starting Family Decision Spinner on port %d", config.port)
    uvicorn.run(create_app(config), host=config.host, port=config.port)


if __name__ == "__main__":
    main()
