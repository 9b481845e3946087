import argparse
import sys

from pydantic import ValidationError

from sandbox_sync.config.settings import Settings
from sandbox_sync.logging.logger import Log
from sandbox_sync.sync.runner import SandboxRunner

COMMANDS = ("setup", "sync")

DESCRIPTION = """\
Commands:
  setup  - Create sandbox database schema only
  sync   - Sync schema and data with anonymization

Environment variables required:
  DATABASE_URL          - Source database connection string
  SANDBOX_DATABASE_URL  - Target sandbox database connection string
  SANDBOX_SALT          - Salt for anonymization hashing (sync only)
"""


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sandbox-sync",
        description="Build an anonymized sandbox copy of the application database.",
        epilog=DESCRIPTION,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("command", nargs="?", help="setup | sync")
    parser.add_argument("--log-level", default=None, help="Override LOG_LEVEL")
    return parser


def main(argv: list[str] | None = None) -> int:
    """Entry point: parse command -> load settings -> run setup or sync."""
    parser = _build_parser()
    args = parser.parse_args(argv)
    if args.command not in COMMANDS:
        parser.print_help()
        return 1

    try:
        settings = Settings()
    except ValidationError as exc:
        Log.configure("INFO")
        Log.error(f"Invalid configuration: {exc}")
        return 1
    try:
        Log.configure(args.log_level or settings.log_level)
    except ValueError as exc:
        Log.configure("INFO")
        Log.error(f"Fatal error: invalid log level: {exc}")
        return 1

    runner = SandboxRunner(settings)
    try:
        if args.command == "sync":
            runner.sync()
        else:
            runner.setup()
    except Exception as exc:
        Log.error(f"Fatal error: {exc}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
