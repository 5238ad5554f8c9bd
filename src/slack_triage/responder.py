"""Delivery of triage reports to a slash command's response URL."""

import logging

import requests

from slack_triage.models import Response

logger = logging.getLogger(__name__)


def deliver(response_url: str, response: Response, timeout: float = 5) -> bool:
    """POST a report to Slack's ``response_url`` for a slash command.

    Returns True when Slack accepted the message. Delivery failures are
    logged rather than raised so a broken webhook never crashes the app.
    """
    try:
        resp = requests.post(response_url, json=response.to_dict(), timeout=timeout)
        resp.raise_for_status()
    except requests.RequestException as exc:
        logger.warning("Failed to deliver triage report: %s", exc)
        return False

    logger.info(
        "Triage report delivered (%s, %d chars)",
        "public" if response.is_public else "ephemeral",
        len(response.text),
    )
    return True
