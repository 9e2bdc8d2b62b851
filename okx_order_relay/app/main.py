"""Application entrypoint."""

from __future__ import annotations

from pathlib import Path

import uvicorn
from dotenv import find_dotenv, load_dotenv

from app.config import load_config
from app.logger import setup_logger


def run(config_path: str | Path | None = None) -> None:
    # Secrets come from the process environment; .env only fills what is unset.
    load_dotenv(find_dotenv(usecwd=True))

    root_dir = Path(__file__).resolve().parents[1]
    config = load_config(config_path or root_dir / "config.yml")
    logger = setup_logger(config)
    logger.info("Starting OKX order relay on {}:{} -> {}", config.host, config.port, config.base_url)
    if config.simulated_trading:
        logger.info("Simulated trading header enabled")

    from web.server import create_app

    uvicorn.run(create_app(config=config), host=config.host, port=config.port)


if __name__ == "__main__":
    run()
