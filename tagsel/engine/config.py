"""Configuration loaded from environment variables.

All settings have sensible defaults. Override via TAGSEL_* env vars or a
YAML file (see yaml_config).
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass, fields

logger = logging.getLogger(__name__)

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def parse_bool(value: object, default: bool) -> bool:
    """Interpret env/YAML style booleans, falling back to ``default``."""
    if isinstance(value, bool):
        return value
    if value is None:
        return default
    text = str(value).strip().lower()
    if text in _TRUE_VALUES:
        return True
    if text in _FALSE_VALUES:
        return False
    logger.warning("Ignoring unrecognized boolean value %r", value)
    return default


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    return parse_bool(raw, default)


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning("Ignoring non-numeric %s=%r", name, raw)
        return default


@dataclass
class TagSelectConfig:
    """Tag selection behaviour."""

    # Jump straight to the match when the lookup finds exactly one.
    no_select_for_one_match: bool = True
    # Close buffers that were opened only to read candidate matches.
    kill_artifact_buffers: bool = True
    # Jump on a single digit when no other tag number starts with it.
    go_if_unambiguous: bool = False
    highlight_after_jump: bool = True
    # Seconds the jump target stays highlighted.
    highlight_duration: float = 1.0
    # Complete on the last component of qualified tag names.
    use_short_name_completion: bool = False

    # Index backend: "auto", "etags" or "ctags".
    backend: str = "auto"
    tags_file: str | None = None
    case_fold: bool = False

    log_level: str = "INFO"

    def validate(self) -> None:
        """Clamp values into allowed ranges."""
        if self.highlight_duration < 0:
            self.highlight_duration = 0.0
        self.backend = (self.backend or "auto").strip().lower()
        self.log_level = (self.log_level or "INFO").strip().upper()

    def replace(self, **overrides) -> TagSelectConfig:
        """Return a copy with non-None ``overrides`` applied."""
        known = {f.name for f in fields(self)}
        values = {f.name: getattr(self, f.name) for f in fields(self)}
        for key, value in overrides.items():
            if key not in known:
                raise TypeError(f"Unknown config option: {key}")
            if value is not None:
                values[key] = value
        config = TagSelectConfig(**values)
        config.validate()
        return config

    @classmethod
    def from_env(cls) -> TagSelectConfig:
        """Load configuration from TAGSEL_* environment variables."""
        tagsel_vars = {
            k: v for k, v in os.environ.items() if k.startswith("TAGSEL_")
        }
        if tagsel_vars:
            logger.info(
                "TagSelectConfig.from_env: TAGSEL_* env overrides: %s",
                ", ".join(f"{k}={v}" for k, v in sorted(tagsel_vars.items())),
            )
        else:
            logger.debug("TagSelectConfig.from_env: no TAGSEL_* env vars set, using defaults")

        config = cls(
            no_select_for_one_match=_env_bool(
                "TAGSEL_NO_SELECT_FOR_ONE_MATCH", cls.no_select_for_one_match
            ),
            kill_artifact_buffers=_env_bool(
                "TAGSEL_KILL_ARTIFACT_BUFFERS", cls.kill_artifact_buffers
            ),
            go_if_unambiguous=_env_bool(
                "TAGSEL_GO_IF_UNAMBIGUOUS", cls.go_if_unambiguous
            ),
            highlight_after_jump=_env_bool(
                "TAGSEL_HIGHLIGHT_AFTER_JUMP", cls.highlight_after_jump
            ),
            highlight_duration=_env_float(
                "TAGSEL_HIGHLIGHT_DURATION", cls.highlight_duration
            ),
            use_short_name_completion=_env_bool(
                "TAGSEL_USE_SHORT_NAME_COMPLETION", cls.use_short_name_completion
            ),
            backend=os.getenv("TAGSEL_BACKEND", cls.backend),
            tags_file=os.getenv("TAGSEL_TAGS_FILE") or None,
            case_fold=_env_bool("TAGSEL_CASE_FOLD", cls.case_fold),
            log_level=os.getenv("TAGSEL_LOG_LEVEL", cls.log_level),
        )
        config.validate()
        logger.debug(
            "TagSelectConfig.from_env: backend=%s tags_file=%s one_match_jump=%s",
            config.backend, config.tags_file, config.no_select_for_one_match,
        )
        return config
