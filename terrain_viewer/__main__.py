# terrain_viewer/__main__.py

"""
================================================================================
TERRAIN VIEWER ENTRY POINT
================================================================================
Starts the interactive viewer against a running simulation backend.

Usage:
    python -m terrain_viewer --api-url http://localhost:5000
    python -m terrain_viewer --config path/to/config.json
================================================================================
"""
import argparse
import logging

from .app import Application, load_config, setup_logging


def main(argv=None):
    parser = argparse.ArgumentParser(description="Interactive viewer for the terrain simulation backend.")
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to a JSON configuration file. Defaults to the packaged config.json."
    )
    parser.add_argument(
        "--api-url",
        type=str,
        default=None,
        help="Base URL of the simulation backend. Overrides TERRAIN_API_URL and the config file."
    )
    parser.add_argument(
        "--log-config",
        type=str,
        default=None,
        help="Path to a logging dictConfig JSON file."
    )
    args = parser.parse_args(argv)

    setup_logging(args.log_config)
    logger = logging.getLogger(__name__)
    config = load_config(args.config, logger)

    app = Application(config, api_url=args.api_url)
    app.run()


if __name__ == "__main__":
    main()
