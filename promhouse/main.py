#!/usr/bin/env python3
"""
promhouse - Prometheus remote read adapter for ClickHouse

Main entry point that loads the config, connects to ClickHouse and
serves the remote read endpoint.
"""

import argparse
import uvicorn

# Support running as script or as package
try:
    from .core.config import load_config_from
    from .core.server import create_app, setup_logging
except ImportError:
    from promhouse.core.config import load_config_from
    from promhouse.core.server import create_app, setup_logging


def main():
    """Main entry point for promhouse."""
    parser = argparse.ArgumentParser(description="Prometheus remote read adapter for ClickHouse")
    parser.add_argument("-c", "--config", help="Path to YAML config", default="config.yaml")
    args = parser.parse_args()

    # Load configuration
    config = load_config_from(args.config)
    setup_logging(config.log_level)

    # Create FastAPI app, fails fast when ClickHouse is unreachable
    app = create_app(config)

    uvicorn.run(app, host=config.host, port=config.port, reload=False, access_log=False)


if __name__ == "__main__":
    main()
