"""YAML configuration loader.

Example YAML:
    select:
      no_select_for_one_match: true
      kill_artifact_buffers: true
      go_if_unambiguous: false
      highlight_after_jump: true
      highlight_duration: 0.5
      use_short_name_completion: false

    index:
      backend: ctags          # auto, etags or ctags
      tags_file: ../tags      # relative to this file
      case_fold: false

    logging:
      level: DEBUG
"""
from __future__ import annotations

import logging
from dataclasses import fields
from pathlib import Path

import yaml

from .config import TagSelectConfig, parse_bool

logger = logging.getLogger(__name__)

_SELECT_BOOL_KEYS = {
    "no_select_for_one_match",
    "kill_artifact_buffers",
    "go_if_unambiguous",
    "highlight_after_jump",
    "use_short_name_completion",
}
_INDEX_KEYS = {"backend", "tags_file", "case_fold"}

TAGS_FILE_NAMES = ("TAGS", "tags")


def _global_config_path() -> Path:
    """Return the per-user config path (~/.tagsel/config.yaml)."""
    return Path.home() / ".tagsel" / "config.yaml"


def discover_config_path(cwd: Path | None = None) -> Path | None:
    """Find a config file for ``cwd``.

    Tries ``.tagsel/tagsel.yaml`` and ``tagsel.yaml`` in ``cwd``, then the
    per-user file.
    """
    cwd = cwd or Path.cwd()
    candidates = [
        cwd / ".tagsel" / "tagsel.yaml",
        cwd / "tagsel.yaml",
        _global_config_path(),
    ]
    for candidate in candidates:
        if candidate.is_file():
            logger.info("Auto-discovered config: %s", candidate)
            return candidate
    logger.debug(
        "No config file found (tried %s); using defaults",
        ", ".join(str(c) for c in candidates),
    )
    return None


def find_tags_file(start: Path | None = None) -> Path | None:
    """Walk up from ``start`` to the filesystem root looking for a tag index."""
    current = (start or Path.cwd()).resolve()
    for directory in (current, *current.parents):
        for name in TAGS_FILE_NAMES:
            candidate = directory / name
            if candidate.is_file():
                logger.debug("Found tag index %s", candidate)
                return candidate
    return None


def _section(raw: dict, name: str, path: Path) -> dict:
    section = raw.get(name) or {}
    if not isinstance(section, dict):
        raise yaml.YAMLError(f"Section '{name}' in {path} must be a mapping")
    return section


def load_yaml_config(
    path: str | Path,
    base: TagSelectConfig | None = None,
) -> TagSelectConfig:
    """Load a YAML config file on top of ``base`` (defaults when omitted).

    Relative ``index.tags_file`` values resolve against the file's
    directory. Unknown keys are logged and ignored.
    """
    path = Path(path)
    logger.info(
        "load_yaml_config: attempting to load config from %s (exists=%s)",
        path, path.exists()
    )
    try:
        with open(path) as f:
            raw = yaml.safe_load(f) or {}
    except FileNotFoundError:
        logger.error(
            "load_yaml_config: config file not found at %s (absolute path: %s)",
            path, path.absolute()
        )
        raise
    except yaml.YAMLError as exc:
        logger.error("load_yaml_config: YAML parse error in %s: %s", path, exc)
        raise

    if not isinstance(raw, dict):
        raise yaml.YAMLError(f"Top level of {path} must be a mapping")

    base = base or TagSelectConfig()
    values = {f.name: getattr(base, f.name) for f in fields(base)}

    select_raw = _section(raw, "select", path)
    for key, value in select_raw.items():
        if key in _SELECT_BOOL_KEYS:
            values[key] = parse_bool(value, values[key])
        elif key == "highlight_duration":
            try:
                values[key] = float(value)
            except (TypeError, ValueError):
                logger.warning(
                    "load_yaml_config: ignoring non-numeric highlight_duration %r",
                    value,
                )
        else:
            logger.warning("load_yaml_config: unknown select option '%s'", key)

    index_raw = _section(raw, "index", path)
    for key, value in index_raw.items():
        if key not in _INDEX_KEYS:
            logger.warning("load_yaml_config: unknown index option '%s'", key)
            continue
        if key == "case_fold":
            values[key] = parse_bool(value, values[key])
        elif key == "tags_file" and value:
            tags_path = Path(str(value)).expanduser()
            if not tags_path.is_absolute():
                tags_path = path.parent / tags_path
            values[key] = str(tags_path)
        elif value:
            values[key] = str(value)

    logging_raw = _section(raw, "logging", path)
    if logging_raw.get("level"):
        values["log_level"] = str(logging_raw["level"])

    unknown_sections = sorted(
        set(raw) - {"select", "index", "logging"}
    )
    if unknown_sections:
        logger.warning(
            "load_yaml_config: ignoring unknown sections: %s",
            ", ".join(str(s) for s in unknown_sections),
        )

    config = TagSelectConfig(**values)
    config.validate()
    logger.info(
        "Parsed YAML config %s: backend=%s tags_file=%s",
        path.name, config.backend, config.tags_file,
    )
    return config
