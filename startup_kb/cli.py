from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Optional, Sequence

from .commands import doctor as cmd_doctor
from .commands import lookup as cmd_lookup
from .commands import seed as cmd_seed
from .config import Settings, find_config
from .errors import InvalidQuery, SeedDataError, StoreUnavailable
from .models import KnowledgeCategory
from .service import KnowledgeService

logger = logging.getLogger("startup_kb")

LOG_FORMAT = "%(levelname).1s | %(name)s | %(message)s"

C_RESET = "\033[0m"
LEVEL_COLORS = {
    logging.DEBUG: "\033[36m",  # Cyan
    logging.INFO: "\033[37m",  # Light gray
    logging.WARNING: "\033[33m",  # Yellow
    logging.ERROR: "\033[31m",  # Red
    logging.CRITICAL: "\033[35m",  # Magenta
}


class ColorFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        color = LEVEL_COLORS.get(record.levelno)
        if not color:
            return message
        return f"{color}{message}{C_RESET}"


class WarningBufferHandler(logging.Handler):
    def __init__(self) -> None:
        super().__init__(level=logging.WARNING)
        self.records: list[str] = []

    def emit(self, record: logging.LogRecord) -> None:
        try:
            msg = self.format(record)
        except Exception:  # pragma: no cover
            msg = record.getMessage()
        self.records.append(msg)


def configure_logging(level_name: str) -> WarningBufferHandler:
    log_level = getattr(logging, level_name.upper(), logging.INFO)
    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(log_level)

    color_handler = logging.StreamHandler()
    color_handler.setFormatter(ColorFormatter(LOG_FORMAT))
    root_logger.addHandler(color_handler)

    warn_buffer = WarningBufferHandler()
    warn_buffer.setFormatter(logging.Formatter(LOG_FORMAT))
    root_logger.addHandler(warn_buffer)
    return warn_buffer


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Startup program knowledge base")
    parser.add_argument("--config", type=Path, help="Path to config.yaml")
    parser.add_argument("--log-level", default="WARNING", help="Python logging level")

    subparsers = parser.add_subparsers(dest="command", required=True)
    find_parser = subparsers.add_parser(
        "find", help="Identify a startup program from its name, executable and/or publisher"
    )
    find_parser.add_argument("--name", default=None, help="Display name of the startup entry")
    find_parser.add_argument("--exe", dest="executable", default=None, help="Executable path or file name")
    find_parser.add_argument("--publisher", default=None, help="Publisher or company name")
    find_parser.add_argument("--json", action="store_true", help="Emit machine-readable JSON to stdout")

    search_parser = subparsers.add_parser("search", help="Keyword search over the knowledge base")
    search_parser.add_argument("keyword", nargs="?", default="", help="Text to look for (empty lists everything)")
    search_parser.add_argument("--limit", type=int, default=20, help="Maximum number of results")
    search_parser.add_argument("--json", action="store_true", help="Emit machine-readable JSON to stdout")

    category_parser = subparsers.add_parser("category", help="List entries of one category")
    category_parser.add_argument("category", choices=[category.value for category in KnowledgeCategory])
    category_parser.add_argument("--json", action="store_true", help="Emit machine-readable JSON to stdout")

    seed_parser = subparsers.add_parser("seed", help="Load the reference dataset into the knowledge store")
    seed_parser.add_argument(
        "--force",
        action="store_true",
        help="Delete existing entries and reseed",
    )
    subparsers.add_parser("doctor", help="Run basic config/store checks")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        settings = Settings.load(find_config(args.config))
    except FileNotFoundError as exc:
        raise SystemExit(str(exc)) from exc
    warn_buffer = configure_logging(args.log_level)

    if args.command == "doctor":
        report = cmd_doctor.run(settings)
        for line in report.checks:
            print(line)
        if not report.ok:
            raise SystemExit(1)
        return

    service: KnowledgeService | None = None
    try:
        service = KnowledgeService.create(settings, seed=False if args.command == "seed" else None)
        match args.command:
            case "find":
                cmd_lookup.run_find(
                    service,
                    name=args.name,
                    executable=args.executable,
                    publisher=args.publisher,
                    json_output=args.json,
                )
            case "search":
                cmd_lookup.run_search(service, args.keyword, limit=args.limit, json_output=args.json)
            case "category":
                cmd_lookup.run_category(service, args.category, json_output=args.json)
            case "seed":
                cmd_seed.run(service, force=args.force)
            case _:
                parser.error("Unknown command")
    except InvalidQuery as exc:
        parser.error(str(exc))
    except (StoreUnavailable, SeedDataError) as exc:
        logger.error("%s", exc)
        raise SystemExit(1) from exc
    finally:
        if service:
            service.close()
        if warn_buffer.records:
            print("\n\033[33mWarnings/Errors summary:\033[0m")
            for line in warn_buffer.records:
                print(f" - {line}")
