"""Selection and ordering of classified triage requests."""

import logging
from collections.abc import Iterable

from slack_triage.models import TriageRequest

logger = logging.getLogger(__name__)


def is_reportable(request: TriageRequest) -> bool:
    """A request is reported when it carries a pending emoji and is not a bot post."""
    return request.emoji is not None and not request.bot


def select(requests: Iterable[TriageRequest]) -> list[TriageRequest]:
    """Drop unreportable requests and order the rest by priority.

    ``sorted`` is stable, so requests with equal priority keep their input
    order.
    """
    requests = list(requests)
    kept = [r for r in requests if is_reportable(r)]
    logger.debug("Selected %d of %d requests", len(kept), len(requests))
    return sorted(kept, key=lambda r: r.priority)
