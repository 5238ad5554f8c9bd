"""Report pipeline: classify, select, render."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from slack_triage.classifier import classify
from slack_triage.config import Config, apply_overrides
from slack_triage.models import Message, Payload, Response
from slack_triage.report import build_response
from slack_triage.selector import select

logger = logging.getLogger(__name__)


def create_triage_report(
    payload: Payload | dict[str, Any],
    messages: Iterable[Message | dict[str, Any]],
    overrides: Mapping[str, Any] | None = None,
    *,
    config: Config | None = None,
) -> Response:
    """Create a triage report for a channel's message history.

    Args:
        payload: The slash command payload (or its raw dict).
        messages: Channel history, as Message objects or raw API dicts.
        overrides: Optional partial config, shallow-merged over ``config``.
        config: Base configuration; defaults to ``Config()``.

    Returns:
        The Slack response to send back to the requester.

    Raises:
        ConfigError: If the merged configuration is invalid.
    """
    settings = apply_overrides(config or Config(), overrides)

    if not isinstance(payload, Payload):
        payload = Payload.from_dict(payload)
    parsed = [m if isinstance(m, Message) else Message.from_dict(m) for m in messages]

    logger.debug("Triaging %d messages from #%s", len(parsed), payload.channel_name)
    requests = select(classify(m, settings) for m in parsed)
    return build_response(payload, requests, settings)
