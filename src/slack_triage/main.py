"""Entry point for slack-triage."""

from __future__ import annotations

import argparse
import json
import logging
import signal
import sys

from slack_triage.config import Config, ConfigError, load_config
from slack_triage.slack_app import DEFAULT_COMMAND, TriageApp
from slack_triage.triage import create_triage_report

logger = logging.getLogger(__name__)


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="slack-triage",
        description="Report pending, in-review and addressed requests in a Slack channel.",
    )
    parser.add_argument(
        "--config",
        metavar="PATH",
        default=None,
        help="Path to config YAML (default: ~/.config/slack-triage/config.yaml)",
    )
    parser.add_argument(
        "--log-level",
        metavar="LEVEL",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (default: INFO)",
    )
    parser.add_argument(
        "--command",
        metavar="NAME",
        default=DEFAULT_COMMAND,
        help=f"Slash command to register (default: {DEFAULT_COMMAND})",
    )
    parser.add_argument(
        "--payload",
        metavar="FILE",
        default=None,
        help="Render one report offline from this slash command payload JSON",
    )
    parser.add_argument(
        "--messages",
        metavar="FILE",
        default=None,
        help="Channel history JSON (a list, or an object with a 'messages' list)",
    )
    args = parser.parse_args(argv)
    if (args.payload is None) != (args.messages is None):
        parser.error("--payload and --messages must be given together")
    return args


def render_offline(payload_path: str, messages_path: str, config: Config) -> dict:
    """Build a report from JSON files and return the Slack response body."""
    with open(payload_path) as f:
        payload = json.load(f)
    with open(messages_path) as f:
        history = json.load(f)

    if isinstance(history, dict):
        history = history.get("messages", [])

    return create_triage_report(payload, history, config=config).to_dict()


def main(argv: list[str] | None = None) -> None:
    args = _parse_args(argv)

    logging.basicConfig(
        format="%(asctime)s %(levelname)-8s [%(name)s] %(message)s",
        level=getattr(logging, args.log_level),
    )

    try:
        config = load_config(args.config)
    except FileNotFoundError as exc:
        logger.error("Config file not found: %s", exc)
        sys.exit(1)
    except ConfigError as exc:
        logger.error("Invalid configuration: %s", exc)
        sys.exit(1)

    logger.info("Configuration loaded successfully")

    if args.payload is not None:
        body = render_offline(args.payload, args.messages, config)
        json.dump(body, sys.stdout, indent=2)
        sys.stdout.write("\n")
        return

    triage_app = TriageApp(config, command=args.command)

    # Graceful shutdown on SIGTERM / SIGINT.
    def _shutdown(signum, _frame):
        sig_name = signal.Signals(signum).name
        logger.info("Received %s, shutting down", sig_name)
        triage_app.close()

    signal.signal(signal.SIGTERM, _shutdown)
    signal.signal(signal.SIGINT, _shutdown)

    logger.info("Starting slack-triage")
    triage_app.start()

