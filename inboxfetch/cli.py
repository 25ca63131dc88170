"""Command-line entry point: prompt for an account and download its inbox."""

from __future__ import annotations

import argparse
import asyncio
import logging
from collections.abc import Sequence

from inboxfetch.client import ImapClient
from inboxfetch.config import prompt_imap_config
from inboxfetch.errors import ClientError

log = logging.getLogger(__name__)

DEFAULT_SERVER = "imap.gmail.com:993"


def main(argv: Sequence[str] | None = None) -> int:
    """Prompt for the account settings, then save every inbox message."""
    parser = argparse.ArgumentParser(
        prog="inboxfetch",
        description="Download every message in a Gmail inbox over IMAP.",
    )
    parser.parse_args(argv)
    logging.basicConfig(level=logging.WARNING, format="%(levelname)s %(name)s: %(message)s")

    try:
        config = prompt_imap_config()
    except ClientError as exc:
        log.error("Failed to get configuration: %s", exc)
        print("Failed to get IMAP configuration. Please try again.")
        return 0

    client = ImapClient(config, DEFAULT_SERVER)
    log.info("Starting IMAP email fetch")
    try:
        asyncio.run(client.fetch_all_emails())
    except ClientError as exc:
        log.error("%s", exc)
        print("Failed to fetch emails. Please try again.")
    else:
        print("Email fetching completed successfully")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())