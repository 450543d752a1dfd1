from __future__ import annotations

import argparse
import logging
from pathlib import Path

from .app import TimedTagsApp
from .commands import clear as cmd_clear
from .commands import doctor as cmd_doctor
from .commands import embed as cmd_embed
from .commands import show as cmd_show
from .config import find_config, load_settings

LOG_FORMAT = "%(levelname).1s | %(name)s | %(message)s"

C_RESET = "\033[0m"
LEVEL_COLORS = {
    logging.DEBUG: "\033[36m",  # Cyan
    logging.INFO: "\033[37m",  # Light gray
    logging.WARNING: "\033[33m",  # Yellow
    logging.ERROR: "\033[31m",  # Red
    logging.CRITICAL: "\033[35m",  # Magenta
}


class ShortPathFormatter(logging.Formatter):
    def __init__(self, fmt: str, roots: list[Path]) -> None:
        super().__init__(fmt)
        self.roots = [str(root) for root in roots if root]

    def _shorten(self, message: str) -> str:
        for root in self.roots:
            if not message:
                break
            message = message.replace(f"{root}/", "")
        return message

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        return self._shorten(message)


class ColorFormatter(ShortPathFormatter):
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

    display_roots = [Path.cwd()]

    color_handler = logging.StreamHandler()
    color_handler.setFormatter(ColorFormatter(LOG_FORMAT, display_roots))
    root_logger.addHandler(color_handler)

    warn_buffer = WarningBufferHandler()
    warn_buffer.setFormatter(ShortPathFormatter(LOG_FORMAT, display_roots))
    root_logger.addHandler(warn_buffer)
    return warn_buffer


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Keep lyrics and chapters in sync across tag encodings")
    parser.add_argument("--config", type=Path, help="Path to config.yaml")
    parser.add_argument("--log-level", default="INFO", help="Python logging level")

    subparsers = parser.add_subparsers(dest="command", required=True)
    show_parser = subparsers.add_parser("show", help="Print the lyrics and chapters resolved for each file")
    show_parser.add_argument("paths", nargs="+", type=Path)

    embed_parser = subparsers.add_parser(
        "embed",
        help="Write the best lyrics/chapters found (tags or sidecars) into every tag encoding",
    )
    embed_parser.add_argument("paths", nargs="+", type=Path)
    embed_parser.add_argument("--language", default=None, help="Also set the track language (e.g. eng)")
    embed_parser.add_argument("--dry-run", action="store_true", help="Report changes without saving")

    clear_parser = subparsers.add_parser("clear", help="Remove managed lyrics/chapters from tags")
    clear_parser.add_argument("paths", nargs="+", type=Path)
    clear_parser.add_argument("--lyrics-only", action="store_true", help="Leave chapters untouched")
    clear_parser.add_argument("--chapters-only", action="store_true", help="Leave lyrics untouched")
    clear_parser.add_argument("--dry-run", action="store_true", help="Report changes without saving")

    subparsers.add_parser("doctor", help="Run basic config checks")
    return parser


def main() -> None:
    parser = build_parser()
    args = parser.parse_args()
    config_path = find_config(args.config)
    settings = load_settings(config_path)
    warn_buffer = configure_logging(args.log_level)
    logging.getLogger("mutagen").setLevel(logging.WARNING)

    app = TimedTagsApp.create(settings)
    try:
        match args.command:
            case "show":
                cmd_show.run(app, args.paths)
            case "embed":
                cmd_embed.run(app, args.paths, language=args.language, dry_run=args.dry_run)
            case "clear":
                if args.lyrics_only and args.chapters_only:
                    parser.error("--lyrics-only and --chapters-only are mutually exclusive")
                cmd_clear.run(
                    app,
                    args.paths,
                    lyrics=not args.chapters_only,
                    chapters=not args.lyrics_only,
                    dry_run=args.dry_run,
                )
            case "doctor":
                report = cmd_doctor.run(settings, config_path=config_path)
                for line in report.checks:
                    print(line)
                if not report.ok:
                    raise SystemExit(1)
            case _:
                parser.error("Unknown command")
    finally:
        if warn_buffer.records:
            print("\n\033[33mWarnings/Errors summary:\033[0m")
            for line in warn_buffer.records:
                print(f" - {line}")


if __name__ == "__main__":
    main()
