from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from dotenv import load_dotenv

from http_service.config import AppConfig, ConfigError, EnvConfigLoader, format_duration
from http_service.logging import init_logging

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="http-service", description="HTTP service configuration tools")
    parser.add_argument(
        "--dotenv",
        default=".env",
        help="Path to a .env file used to populate unset environment variables (default: .env)",
    )
    parser.add_argument(
        "--no-dotenv",
        action="store_true",
        help="Disable loading .env (only the process environment is read)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True, help="Command to run")

    # Command: check
    subparsers.add_parser("check", help="Validate the environment and report every invalid setting")

    # Command: show
    show_parser = subparsers.add_parser("show", help="Print the effective configuration")
    show_parser.add_argument(
        "--strict",
        action="store_true",
        help="Exit with an error instead of falling back to defaults for invalid settings.",
    )

    return parser


def _load_dotenv_if_present(dotenv_path: Path) -> None:
    if not dotenv_path.exists():
        return
    load_dotenv(dotenv_path=dotenv_path, override=False)


def _describe(config: AppConfig) -> Sequence[str]:
    server = config.server
    return [
        f"log.level={config.log.level}",
        f"log.format={config.log.format}",
        f"log.output={config.log.output}",
        f"server.address={server.address}",
        f"server.read_timeout={format_duration(server.read_timeout)}",
        f"server.read_header_timeout={format_duration(server.read_header_timeout)}",
        f"server.write_timeout={format_duration(server.write_timeout)}",
        f"server.idle_timeout={format_duration(server.idle_timeout)}",
        f"server.shutdown_timeout={format_duration(server.shutdown_timeout)}",
    ]


def _report(err: ConfigError) -> None:
    for error in err.errors:
        print(error, file=sys.stderr)


def _check(loader: EnvConfigLoader) -> int:
    _, err = loader.load_with_errors()
    if err is not None:
        _report(err)
        return 1
    print("configuration ok")
    return 0


def _show(loader: EnvConfigLoader, *, strict: bool) -> int:
    config, err = loader.load_with_errors()
    if err is not None and strict:
        _report(err)
        return 1

    init_logging(config.log)
    if err is not None:
        for error in err.errors:
            logger.warning("config.fallback_to_default env=%s error=%s", error.key, error)
    logger.info("config.effective %s", " ".join(_describe(config)))

    for line in _describe(config):
        print(line)
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    if not args.no_dotenv:
        _load_dotenv_if_present(Path(args.dotenv))

    loader = EnvConfigLoader()
    if args.command == "check":
        return _check(loader)
    return _show(loader, strict=args.strict)


if __name__ == "__main__":
    sys.exit(main())
