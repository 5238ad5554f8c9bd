"""Slash command app using Socket Mode.

Connects to Slack via the bolt framework, answers the triage slash command
with a report built from the channel's recent history.
"""

from __future__ import annotations

import logging
import os

from slack_bolt import App
from slack_bolt.adapter.socket_mode import SocketModeHandler
from slack_sdk.errors import SlackApiError

from slack_triage.config import Config
from slack_triage.models import Payload, Response
from slack_triage.responder import deliver
from slack_triage.triage import create_triage_report

logger = logging.getLogger(__name__)

DEFAULT_COMMAND = "/triage"
DEFAULT_HISTORY_LIMIT = 200


class TriageApp:
    """Wraps a Slack Bolt ``App`` with Socket Mode for the triage command.

    Responsibilities
    ----------------
    * Registers the slash command handler on the bolt app.
    * Fetches one page of channel history for each command.
    * Builds the report and sends it back to the requester.
    """

    def __init__(
        self,
        config: Config,
        command: str = DEFAULT_COMMAND,
        history_limit: int = DEFAULT_HISTORY_LIMIT,
    ) -> None:
        bot_token = os.environ["SLACK_BOT_TOKEN"]
        app_token = os.environ["SLACK_APP_TOKEN"]

        self._config = config
        self._command = command
        self._history_limit = history_limit

        self._app = App(token=bot_token)
        self._handler = SocketModeHandler(self._app, app_token)

        self._app.command(command)(self.handle_command)
        logger.info("Registered slash command %s", command)

    # -- public properties / helpers -----------------------------------------

    @property
    def app(self) -> App:
        """The underlying ``slack_bolt.App`` instance."""
        return self._app

    @property
    def command(self) -> str:
        return self._command

    # -- lifecycle -----------------------------------------------------------

    def start(self) -> None:
        """Start the Socket Mode handler (blocking)."""
        logger.info("Starting Socket Mode handler")
        self._handler.start()

    def close(self) -> None:
        """Shut down the Socket Mode handler gracefully."""
        logger.info("Closing Socket Mode handler")
        self._handler.close()

    # -- command handling ----------------------------------------------------

    def handle_command(self, ack, command: dict, client, respond) -> None:
        """Handle one slash command invocation.

        Parameters
        ----------
        ack:
            Bolt acknowledgement callable; must be called within 3 seconds.
        command:
            The slash command payload.
        client:
            A ``slack_sdk.web.client.WebClient`` instance.
        respond:
            Bolt helper posting to the command's ``response_url``.
        """
        ack()
        payload = Payload.from_dict(command)

        try:
            history = client.conversations_history(
                channel=payload.channel_id, limit=self._history_limit
            )
        except SlackApiError as exc:
            logger.warning(
                "Failed to fetch history for %s: %s", payload.channel_id, exc
            )
            respond(
                text=f"Sorry, I couldn't read the history of <#{payload.channel_id}>.",
                response_type="ephemeral",
            )
            return

        messages = history.get("messages", [])
        logger.info(
            "Triage requested by %s in #%s (%d messages)",
            payload.user_id,
            payload.channel_name,
            len(messages),
        )

        response = create_triage_report(payload, messages, config=self._config)
        self._send(payload, response, respond)

    # -- private helpers -----------------------------------------------------

    def _send(self, payload: Payload, response: Response, respond) -> None:
        if payload.response_url:
            deliver(payload.response_url, response)
        else:
            respond(**response.to_dict())
