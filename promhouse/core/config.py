#!/usr/bin/env python3
"""
promhouse Configuration Management

Everything is read from a single YAML file:

    host: 0.0.0.0
    port: 9201
    log_level: INFO
    read_ignore_label: "prometheus=ha"
    read_ignore_hints: false
    clickhouse:
      host: localhost
      port: 8123
      database: default
      username: default
      password: ""
      table: metrics.samples
      tls: false
"""

import logging
from typing import Optional

import yaml
from pydantic import BaseModel, field_validator

from ..database import validate_table_name
from ..models import ReadSettings

logger = logging.getLogger("promhouse.config")


class ClickHouseConfig(BaseModel):
    host: str = "localhost"
    port: int = 8123
    database: str = "default"
    username: str = "default"
    password: str = ""
    table: str
    tls: bool = False               # Skips certificate verification when on
    connect_timeout: int = 5
    max_connections: int = 16

    @field_validator("table")
    @classmethod
    def _check_table(cls, v: str) -> str:
        return validate_table_name(v)


class ServerConfig(BaseModel):
    host: str = "0.0.0.0"
    port: int = 9201
    log_level: str = "INFO"
    clickhouse: ClickHouseConfig
    # Read path behavior
    read_ignore_label: Optional[str] = None   # "name=value" equality matches to drop
    read_ignore_hints: bool = False           # Never bucket by step/range hints

    def read_settings(self) -> ReadSettings:
        """Snapshot of the options the read path consumes."""
        return ReadSettings(
            table=self.clickhouse.table,
            ignore_label=self.read_ignore_label or None,
            ignore_hints=self.read_ignore_hints,
        )


def load_config_from(path: str) -> ServerConfig:
    """Load server configuration from YAML file."""
    with open(path, "r") as f:
        data = yaml.safe_load(f) or {}
    cfg = ServerConfig(**data)
    logger.info(f"Loaded configuration from {path}")
    return cfg
