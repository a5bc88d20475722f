"""tagsel — main application entry point."""

from __future__ import annotations

import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

import yaml

from tagsel.engine.config import TagSelectConfig
from tagsel.engine.errors import TagSelectError

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s [pid=%(process)d] %(message)s"


def _log_dir() -> Path:
    return Path(os.getenv("TAGSEL_LOG_DIR") or Path.home() / ".tagsel" / "logs")


def configure_logging(level: str, console: bool = False) -> Path | None:
    """Send logs to a rotating file, and to stderr outside the TUI.

    Returns the log file path, or None when the log directory is unusable.
    """
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    root.handlers.clear()
    formatter = logging.Formatter(LOG_FORMAT)

    log_file: Path | None = _log_dir() / "tagsel.log"
    try:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_file, maxBytes=2_000_000, backupCount=5, encoding="utf-8"
        )
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)
    except OSError:
        log_file = None

    if console:
        stream_handler = logging.StreamHandler(sys.stderr)
        stream_handler.setFormatter(formatter)
        stream_handler.setLevel(logging.WARNING)
        root.addHandler(stream_handler)
    return log_file


def load_config(args) -> TagSelectConfig:
    """Defaults, then TAGSEL_* env vars, then the YAML file, then CLI flags."""
    from tagsel.engine.yaml_config import discover_config_path, load_yaml_config

    config = TagSelectConfig.from_env()
    config_path = Path(args.config) if args.config else discover_config_path()
    if config_path is not None:
        config = load_yaml_config(config_path, base=config)

    return config.replace(
        tags_file=args.tags,
        backend=args.backend,
        log_level=args.log_level,
        no_select_for_one_match=False if args.select_one else None,
        go_if_unambiguous=True if args.go_if_unambiguous else None,
    )


def resolve_tags_file(config: TagSelectConfig) -> Path:
    from tagsel.engine.errors import TagIndexError
    from tagsel.engine.yaml_config import find_tags_file

    if config.tags_file:
        path = Path(config.tags_file).expanduser()
    else:
        found = find_tags_file(Path.cwd())
        if found is None:
            raise TagIndexError(Path.cwd() / "TAGS", "no TAGS or tags file found")
        path = found
    if not path.is_file():
        raise TagIndexError(path, "file does not exist")
    return path


def print_matches(identifier: str, probe, registry, marks, config: TagSelectConfig) -> int:
    """Print the numbered, grouped list for ``identifier``. Returns an exit code."""
    from tagsel.engine.aggregator import MatchAggregator
    from tagsel.engine.selection import render_lines

    aggregator = MatchAggregator(probe, marks, registry, config)
    groups = aggregator.find_all(identifier)
    if not groups:
        print(f"No tags found for '{identifier}'")
        return 1
    for line in render_lines(identifier, groups):
        print(line.text)
    return 0


def main(argv: list[str] | None = None) -> None:
    import argparse

    parser = argparse.ArgumentParser(
        prog="tagsel",
        description="tagsel — list every definition of a tag and jump to one",
    )
    parser.add_argument(
        "identifier", nargs="?",
        help="Tag to look up (or a prefix with --complete)",
    )
    parser.add_argument(
        "--tags", metavar="PATH",
        help="Tag index file (default: nearest TAGS or tags file upwards)",
    )
    parser.add_argument(
        "--backend", choices=["auto", "etags", "ctags"],
        help="Index format (default: guessed from the file name)",
    )
    parser.add_argument(
        "--config", metavar="PATH",
        help="YAML config file (default: .tagsel/tagsel.yaml, tagsel.yaml, ~/.tagsel/config.yaml)",
    )
    parser.add_argument(
        "--list", action="store_true",
        help="Print the numbered tag list and exit (no TUI)",
    )
    parser.add_argument(
        "--complete", action="store_true",
        help="Print tag names starting with IDENTIFIER and exit",
    )
    parser.add_argument(
        "--select-one", action="store_true",
        help="Show the list even when there is only one match",
    )
    parser.add_argument(
        "--go-if-unambiguous", action="store_true",
        help="Jump on a single digit when no other tag number starts with it",
    )
    parser.add_argument(
        "--log-level", metavar="LEVEL",
        help="Log level (default: INFO or TAGSEL_LOG_LEVEL)",
    )
    args = parser.parse_args(argv)

    headless = args.list or args.complete
    try:
        config = load_config(args)
    except (OSError, ValueError, yaml.YAMLError) as exc:
        print(f"Error: cannot load config: {exc}", file=sys.stderr)
        sys.exit(2)
    log_file = configure_logging(config.log_level, console=headless)
    logger = logging.getLogger(__name__)
    logger.info(
        "Starting tagsel cwd=%s identifier=%s log=%s",
        Path.cwd(), args.identifier, log_file,
    )

    if not args.identifier and headless:
        print("Error: an identifier is required with --list/--complete.", file=sys.stderr)
        sys.exit(2)

    from tagsel.engine.buffers import BufferRegistry
    from tagsel.engine.history import MarkStack
    from tagsel.engine.probes import complete_identifiers, create_probe

    registry = BufferRegistry()
    marks = MarkStack()
    try:
        tags_path = resolve_tags_file(config)
        probe = create_probe(
            config.backend, tags_path, registry, marks, case_fold=config.case_fold
        )
        if args.complete:
            for name in complete_identifiers(
                probe, args.identifier, config.use_short_name_completion
            ):
                print(name)
            sys.exit(0)
        if args.list:
            sys.exit(print_matches(args.identifier, probe, registry, marks, config))
    except TagSelectError as exc:
        logger.error("%s", exc)
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)

    # TUI mode
    from tagsel.tui.app import TagSelectApp

    app = TagSelectApp(
        probe,
        config=config,
        identifier=args.identifier,
        registry=registry,
        marks=marks,
    )
    app.run()


if __name__ == "__main__":
    main()
