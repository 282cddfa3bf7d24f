#!/usr/bin/env python3
"""
promhouse FastAPI application factory
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from ..api.routes.health_routes import create_health_routes
from ..api.routes.read_routes import create_read_routes
from ..database import ClickHouseAdapter, RowSource
from .config import ServerConfig

logger = logging.getLogger("promhouse.server")


def setup_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def create_app(config: ServerConfig, source: Optional[RowSource] = None) -> FastAPI:
    """
    Build the application.

    Args:
        config: Loaded server configuration
        source: Execution surface; a ClickHouseAdapter is created from the
            config when omitted (connects and pings right away)
    """
    if source is None:
        source = ClickHouseAdapter.from_config(config.clickhouse)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        source.close()

    app = FastAPI(title="promhouse", lifespan=lifespan)
    app.include_router(create_read_routes(source, config.read_settings()))
    app.include_router(create_health_routes())

    logger.info(
        f"Serving remote read from table {config.clickhouse.table} "
        f"(ignore_label={config.read_ignore_label!r}, ignore_hints={config.read_ignore_hints})"
    )
    return app
