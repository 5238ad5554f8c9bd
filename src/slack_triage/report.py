"""Rendering of triage requests into a Slack slash-command response."""

import copy
import logging
import re

from slack_triage.config import Config
from slack_triage.models import Payload, Response, TriageRequest

logger = logging.getLogger(__name__)

_PLACEHOLDER = re.compile(r"\{\{(\w+)\}\}")


def render_template(text: str, values: dict[str, object]) -> str:
    """Replace ``{{key}}`` placeholders with the matching entry of ``values``.

    Placeholders without a value are left as they are.
    """

    def _sub(match: re.Match) -> str:
        key = match.group(1)
        return str(values[key]) if key in values else match.group(0)

    return _PLACEHOLDER.sub(_sub, text)


def channel_reference(payload: Payload) -> str:
    return f"<#{payload.channel_id}|{payload.channel_name}>"


def deep_link(payload: Payload, request: TriageRequest) -> str:
    """Permalink to the request's message within the channel."""
    return (
        f"https://{payload.team_domain}.slack.com/archives/"
        f"{payload.channel_name}/p{request.id}"
    )


def build_attribution(request: TriageRequest, config: Config) -> str:
    """Return the user mention appended to a rendered request, if enabled.

    Pending and addressed requests credit the message author; requests under
    review credit the first user who reacted with the primary review emoji.
    """
    attributes = config.display_user_attributes

    if request.pending and "pending" in attributes:
        return f"<@{request.message.user}>"

    if request.addressed and "addressed" in attributes:
        return f"<@{request.message.user}>"

    if request.review and "review" in attributes:
        if not config.review.emojis:
            return ""
        emoji = config.review.emojis[0]
        reaction = request.message.reaction(emoji)
        if reaction is None or not reaction.users:
            return f"(:{emoji}:)"
        return f"(:{emoji}: <@{reaction.users[0]}>)"

    return ""


def build_item(request: TriageRequest, payload: Payload, config: Config) -> str:
    parts = [f":{request.emoji}:", deep_link(payload, request), build_attribution(request, config)]
    return " ".join(p for p in parts if p)


def build_section(
    name: str,
    requests: list[TriageRequest],
    payload: Payload,
    config: Config,
) -> str:
    """Render one display section: its title followed by one line per request."""
    section = config.section(name)
    filtered = [r for r in requests if r.flag(name)]
    lines = [section.title] + [build_item(r, payload, config) for r in filtered]

    return render_template(
        "\n".join(lines),
        {"count": len(filtered), "channel": channel_reference(payload)},
    )


def is_publish_request(payload: Payload, config: Config) -> bool:
    return re.search(config.publish_text, payload.text or "", re.IGNORECASE) is not None


def build_response(
    payload: Payload,
    requests: list[TriageRequest],
    config: Config,
) -> Response:
    """Assemble the full report.

    Published reports are posted to the whole channel; otherwise the report
    stays ephemeral and carries the help attachments.
    """
    text = "\n\n\n".join(
        build_section(name, requests, payload, config) for name in config.display
    )
    response = Response(text=text, unfurl_links=config.unfurl_links)

    if is_publish_request(payload, config):
        response.response_type = "in_channel"
    else:
        response.attachments = copy.deepcopy(config.help)

    logger.info(
        "Built triage report for #%s: %d requests, %s",
        payload.channel_name,
        len(requests),
        "public" if response.is_public else "ephemeral",
    )
    return response
