"""Configuration loading and validation for slack-triage."""

from __future__ import annotations

import copy
import dataclasses
import logging
import os
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

import yaml

logger = logging.getLogger(__name__)

SECTION_NAMES = ("pending", "review", "addressed")

KNOWN_KEYS = {
    "pending",
    "review",
    "addressed",
    "display",
    "display_user_attributes",
    "unfurl_links",
    "publish_text",
    "help",
}

DEFAULT_CONFIG_PATH = "~/.config/slack-triage/config.yaml"

DEFAULT_HELP = [
    {
        "fallback": "How to use triage",
        "color": "#36a64f",
        "title": "How to use triage",
        "text": (
            "Flag a request by adding :red_circle:, :large_blue_circle: or "
            ":white_circle: to your message (highest priority first).\n"
            "React with :eyes: when you start reviewing it and with "
            ":white_check_mark: once it has been addressed.\n"
            "Run `/triage publish` to share this report with the channel."
        ),
        "mrkdwn_in": ["text"],
    }
]


class ConfigError(ValueError):
    """Raised when the triage configuration is unusable."""


@dataclass
class Section:
    emojis: list[str]  # shortcodes without colons, in priority order
    title: str  # may contain {{count}} and {{channel}}


@dataclass
class Config:
    pending: Section = field(
        default_factory=lambda: Section(
            emojis=["red_circle", "large_blue_circle", "white_circle"],
            title="*{{count}} pending requests in {{channel}}*",
        )
    )
    review: Section = field(
        default_factory=lambda: Section(
            emojis=["eyes"],
            title="*{{count}} requests under review*",
        )
    )
    addressed: Section = field(
        default_factory=lambda: Section(
            emojis=["white_check_mark", "heavy_check_mark", "x"],
            title="*{{count}} addressed requests*",
        )
    )
    display: list[str] = field(default_factory=lambda: list(SECTION_NAMES))
    display_user_attributes: list[str] = field(default_factory=lambda: ["review"])
    unfurl_links: bool = False
    publish_text: str = "publish"
    help: list[dict[str, Any]] = field(default_factory=lambda: copy.deepcopy(DEFAULT_HELP))

    def section(self, name: str) -> Section:
        """Return the section called ``name``, raising ConfigError if unknown."""
        if name not in SECTION_NAMES:
            raise ConfigError(
                f"Unknown section '{name}'. Must be one of: {', '.join(SECTION_NAMES)}"
            )
        return getattr(self, name)


def _parse_section(value: Any, field_name: str) -> Section:
    """Coerce a Section or an ``{emojis, title}`` mapping into a Section."""
    if isinstance(value, Section):
        return value
    if not isinstance(value, Mapping):
        raise ConfigError(f"'{field_name}' must be a mapping with 'emojis' and 'title'")
    emojis = value.get("emojis", [])
    if isinstance(emojis, str):
        emojis = [emojis]
    if not isinstance(emojis, (list, tuple)):
        raise ConfigError(f"{field_name}.emojis must be a list of strings")
    return Section(emojis=list(emojis), title=str(value.get("title") or ""))


def _validate_config(config: Config) -> None:
    """Validate config values, raising ConfigError on invalid fields."""
    for name in SECTION_NAMES:
        section = getattr(config, name)
        if not isinstance(section.emojis, (list, tuple)) or not all(
            isinstance(e, str) for e in section.emojis
        ):
            raise ConfigError(f"{name}.emojis must be a list of strings")

    for key in ("display", "display_user_attributes"):
        value = getattr(config, key)
        if not isinstance(value, (list, tuple)):
            raise ConfigError(f"'{key}' must be a list of section names")
        for name in value:
            if name not in SECTION_NAMES:
                raise ConfigError(
                    f"Unknown section '{name}' in {key}. "
                    f"Must be one of: {', '.join(SECTION_NAMES)}"
                )

    if not isinstance(config.unfurl_links, bool):
        raise ConfigError(
            f"unfurl_links must be a boolean, got {type(config.unfurl_links).__name__}"
        )

    try:
        re.compile(config.publish_text)
    except (re.error, TypeError) as exc:
        raise ConfigError(f"publish_text is not a valid pattern: {exc}") from exc

    if not isinstance(config.help, list):
        raise ConfigError(f"help must be a list of attachments, got {type(config.help).__name__}")


def apply_overrides(config: Config, overrides: Mapping[str, Any] | None) -> Config:
    """Return a copy of ``config`` with ``overrides`` shallow-merged over it.

    A key present in ``overrides`` replaces the whole field; section entries
    are not merged with their defaults. Unknown keys are logged and ignored.
    The result is validated before it is returned.
    """
    changes: dict[str, Any] = {}
    for key, value in (overrides or {}).items():
        if key not in KNOWN_KEYS:
            logger.warning("Unknown config key '%s'; ignoring", key)
            continue
        if key in SECTION_NAMES:
            value = _parse_section(value, key)
        elif key in ("display", "display_user_attributes") and isinstance(value, str):
            value = [value]
        changes[key] = value

    merged = dataclasses.replace(config, **changes)
    _validate_config(merged)
    return merged


def load_config(path: str | None = None) -> Config:
    """Load configuration from a YAML file.

    Config path resolution order:
    1. Explicit path argument
    2. SLACK_TRIAGE_CONFIG_PATH environment variable
    3. ~/.config/slack-triage/config.yaml (optional; defaults if missing)
    """
    if path is None:
        path = os.environ.get("SLACK_TRIAGE_CONFIG_PATH")
    if path is None:
        path = os.path.expanduser(DEFAULT_CONFIG_PATH)
        if not os.path.exists(path):
            logger.debug("No config file at %s; using defaults", path)
            return apply_overrides(Config(), None)

    with open(path) as f:
        raw = yaml.safe_load(f)

    if raw is None:
        raw = {}

    if not isinstance(raw, dict):
        raise ConfigError(f"Config file must contain a YAML mapping, got {type(raw).__name__}")

    return apply_overrides(Config(), raw)
