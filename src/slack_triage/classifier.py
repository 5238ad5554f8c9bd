"""Emoji-based triage classification of Slack messages."""

import logging
import re

from slack_triage.config import Config
from slack_triage.models import BOT_SUBTYPE, Message, TriageRequest

logger = logging.getLogger(__name__)


def _text_match(emojis: list[str], text: str) -> str | None:
    """Return the leftmost pending emoji mentioned in ``text``, if any."""
    if not emojis:
        return None
    pattern = "|".join(re.escape(e) for e in emojis)
    match = re.search(pattern, text)
    return match.group(0) if match else None


def classify(message: Message, config: Config) -> TriageRequest:
    """Derive the triage state of a single message.

    The pending emoji comes from the text unless one of the reactions is a
    pending emoji, in which case the reaction wins. When several reactions
    qualify, the one ranked highest in ``config.pending.emojis`` is used.

    Precedence of states: addressed > review > pending. Bot posts are
    classified like any other message; filtering them is left to the
    selector.
    """
    reactions = message.reaction_names
    pending_emojis = config.pending.emojis

    emoji = _text_match(pending_emojis, message.text)

    reacted = [e for e in pending_emojis if e in reactions]
    if reacted:
        emoji = reacted[0]

    addressed = any(e in reactions for e in config.addressed.emojis)
    review = any(e in reactions for e in config.review.emojis) and not addressed
    pending = emoji is not None and not review and not addressed

    priority = pending_emojis.index(emoji) if emoji in pending_emojis else -1

    request = TriageRequest(
        bot=message.subtype == BOT_SUBTYPE,
        priority=priority,
        emoji=emoji,
        review=review,
        addressed=addressed,
        pending=pending,
        id=message.ts.replace(".", "", 1),
        message=message,
    )

    logger.debug(
        "Classified %s: emoji=%s priority=%d pending=%s review=%s addressed=%s bot=%s",
        message.ts,
        emoji,
        priority,
        pending,
        review,
        addressed,
        request.bot,
    )
    return request
