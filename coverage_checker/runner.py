"""
Command-line runner for the coverage checker.

Usage:
    python -m coverage_checker.runner --zip 02139

    # Explicit coordinates
    python -m coverage_checker.runner --lat 42.3626 --lon -71.0843

    # Serve the HTTP API
    python -m coverage_checker.runner --serve --port 8000
"""
import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

import yaml

from coverage_checker.pipeline import build_pipeline
from coverage_checker.utils.config import CheckerConfig, get_default_config, load_config
from coverage_checker.utils.exceptions import (
    ConfigurationError,
    CoverageCheckerError,
    DataLoadError,
    InvalidInput,
)
from coverage_checker.utils.logging_config import configure_logging, get_logger
from coverage_checker.validation.validators import validate_location_query

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_INVALID_INPUT = 2


def _load(config_path: Optional[Path]) -> CheckerConfig:
    if config_path is None:
        return get_default_config()
    return load_config(config_path)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='LTE coverage checker - FloLive EU2/US2 operators near a ZIP or coordinate',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Check a ZIP code
  coverage-check --zip 02139

  # Check a coordinate with a custom config
  coverage-check --lat 42.3626 --lon -71.0843 --config config/default.yaml

  # Run the HTTP service
  coverage-check --serve --host 0.0.0.0 --port 8000
        """
    )

    parser.add_argument('--zip', dest='zip_code', help='US ZIP code (5 digits or ZIP+4)')
    parser.add_argument('--lat', help='Latitude in decimal degrees')
    parser.add_argument('--lon', help='Longitude in decimal degrees')

    parser.add_argument(
        '--config',
        type=Path,
        default=None,
        help='YAML config file (default: built-in defaults + environment)'
    )
    parser.add_argument(
        '--log-level',
        default=None,
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
        help='Override the configured log level'
    )
    parser.add_argument('--json-logs', action='store_true', help='Emit JSON logs')

    parser.add_argument('--serve', action='store_true', help='Run the HTTP service instead of a single check')
    parser.add_argument('--host', default='127.0.0.1', help='Bind address for --serve (default: 127.0.0.1)')
    parser.add_argument('--port', type=int, default=8000, help='Port for --serve (default: 8000)')

    return parser


def serve(config: CheckerConfig, host: str, port: int) -> None:
    import uvicorn
    from coverage_checker.api import create_app

    uvicorn.run(create_app(config), host=host, port=port, log_config=None)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for CLI."""
    args = build_parser().parse_args(argv)

    try:
        config = _load(args.config)
    except (FileNotFoundError, ValueError, yaml.YAMLError) as e:
        configure_logging(log_level=args.log_level or "INFO", json_output=args.json_logs, stream=sys.stderr)
        logger.error("config_load_failed", error=str(e))
        return EXIT_FAILURE

    configure_logging(
        log_level=args.log_level or config.logging.level,
        json_output=args.json_logs or config.logging.json_output,
        stream=sys.stderr,
    )

    try:
        if args.serve:
            serve(config, args.host, args.port)
            return EXIT_OK

        query = validate_location_query(args.zip_code, args.lat, args.lon)
        pipeline = build_pipeline(config)
        if query.is_zip:
            result = pipeline.run(zip_code=query.zip_code)
        else:
            result = pipeline.run(latitude=query.latitude, longitude=query.longitude)
    except InvalidInput as e:
        print(json.dumps({"error": str(e)}), file=sys.stderr)
        return EXIT_INVALID_INPUT
    except (ConfigurationError, DataLoadError) as e:
        logger.error("startup_failed", error=str(e))
        print(json.dumps({"error": str(e)}), file=sys.stderr)
        return EXIT_FAILURE
    except CoverageCheckerError as e:
        logger.error("coverage_check_failed", error=str(e))
        print(json.dumps({"error": str(e)}), file=sys.stderr)
        return EXIT_FAILURE

    print(json.dumps(result.to_dict(), indent=2))
    return EXIT_OK


if __name__ == '__main__':
    sys.exit(main())
