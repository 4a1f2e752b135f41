"""
Open311 Sync Script
Pulls every service request from the Open311 endpoint and writes it to InfluxDB

Usage:
    python -m scripts.sync_open311 [path/to/config.json]
"""

import sys

from src.pipeline.runner import run_pipeline
from src.shared.config import get_config
from src.shared.log_setup import configure_logging


def main(argv: list[str] | None = None) -> int:
    """Run one sync and return a process exit code."""
    argv = sys.argv[1:] if argv is None else argv
    config_path = argv[0] if argv else None

    try:
        config = get_config()
        configure_logging(config)
    except Exception as e:
        print(f"Could not load pipeline settings: {e}", file=sys.stderr)
        return 1

    result = run_pipeline(config_path=config_path, config=config)

    print("\n=== Sync Results ===")
    print(f"Stage reached: {result.stage}")
    print(f"Records fetched: {result.records_fetched}")
    print(f"Points written: {result.points_written}")
    print(f"Points without timestamp: {result.invalid_timestamps}")
    print(f"Duration: {result.duration_seconds:.2f}s")
    if not result.success:
        print(f"Error: {result.error_message}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
