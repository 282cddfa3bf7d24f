"""promhouse - Prometheus remote read adapter for ClickHouse"""

__version__ = "0.1.0"
