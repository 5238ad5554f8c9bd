"""Shared data structures used across all pipeline stages."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

BOT_SUBTYPE = "bot_message"


@dataclass
class Reaction:
    name: str  # emoji shortcode without colons, e.g. "eyes"
    users: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> Reaction:
        return cls(name=raw.get("name", ""), users=list(raw.get("users") or []))


@dataclass
class Message:
    ts: str  # Slack timestamp, e.g. "1700000000.000100"
    text: str = ""
    user: str | None = None
    subtype: str | None = None  # "bot_message" marks an automated post
    reactions: list[Reaction] = field(default_factory=list)

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> Message:
        """Build a Message from a ``conversations.history`` entry.

        Missing fields fall back to empty values so one malformed entry never
        aborts a whole report.
        """
        return cls(
            ts=raw.get("ts") or "",
            text=raw.get("text") or "",
            user=raw.get("user"),
            subtype=raw.get("subtype"),
            reactions=[Reaction.from_dict(r) for r in raw.get("reactions") or []],
        )

    @property
    def reaction_names(self) -> list[str]:
        return [r.name for r in self.reactions]

    def reaction(self, name: str) -> Reaction | None:
        """Return the first reaction with the given name, if any."""
        for r in self.reactions:
            if r.name == name:
                return r
        return None


@dataclass
class Payload:
    channel_id: str
    channel_name: str
    team_domain: str
    text: str = ""  # free-form command arguments
    response_url: str | None = None
    user_id: str | None = None

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> Payload:
        return cls(
            channel_id=raw.get("channel_id", ""),
            channel_name=raw.get("channel_name", ""),
            team_domain=raw.get("team_domain", ""),
            text=raw.get("text") or "",
            response_url=raw.get("response_url"),
            user_id=raw.get("user_id"),
        )


@dataclass
class TriageRequest:
    bot: bool
    priority: int  # index into pending emojis, -1 when not ranked
    emoji: str | None  # matched pending emoji
    review: bool
    addressed: bool
    pending: bool
    id: str  # ts without its first period, used in deep links
    message: Message

    def flag(self, section: str) -> bool:
        """Return the state flag named after a display section."""
        return {
            "pending": self.pending,
            "review": self.review,
            "addressed": self.addressed,
        }[section]


@dataclass
class Response:
    text: str
    unfurl_links: bool = False
    response_type: str | None = None  # "in_channel" when published
    attachments: list[dict[str, Any]] | None = None  # help, when ephemeral

    @property
    def is_public(self) -> bool:
        return self.response_type == "in_channel"

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a Slack message body, omitting unset visibility keys."""
        body: dict[str, Any] = {"text": self.text, "unfurl_links": self.unfurl_links}
        if self.response_type is not None:
            body["response_type"] = self.response_type
        if self.attachments is not None:
            body["attachments"] = self.attachments
        return body
