"""Interactive collection of the settings needed to fetch a mailbox."""

from __future__ import annotations

import logging
import os
import sys
from dataclasses import dataclass
from typing import TextIO

from inboxfetch.errors import EmptyInputError, InputError

log = logging.getLogger(__name__)

DEFAULT_MAX_CONCURRENT = 5


@dataclass
class ImapConfig:
    """Account credentials, output directory and connection limit."""

    email: str = ""
    password: str = ""
    dir_path: str = ""
    max_concurrent: int = DEFAULT_MAX_CONCURRENT


def _stream(stream: TextIO | None) -> TextIO:
    return sys.stdin if stream is None else stream


def read_user_input(stream: TextIO | None = None) -> str:
    """Read one line and return it with every whitespace character removed."""
    try:
        line = _stream(stream).readline()
    except OSError as exc:
        raise InputError(exc) from exc
    cleaned = "".join(line.split())
    if not cleaned:
        raise EmptyInputError("input")
    return cleaned


def validate_email(email: str) -> str:
    """Check that an address looks plausible and return it."""
    if not email:
        raise EmptyInputError("email")
    if "@" not in email or "." not in email:
        raise InputError("Invalid email format")
    return email


def prompt_email(stream: TextIO | None = None) -> str:
    """Ask for the mailbox address."""
    print("Enter your Gmail address: ")
    return validate_email(read_user_input(stream))


def prompt_password(stream: TextIO | None = None) -> str:
    """Ask for the application password."""
    print("Enter your app password: ")
    entered = read_user_input(stream)
    if not entered:
        raise EmptyInputError("password")
    return entered


def prompt_directory_path(stream: TextIO | None = None) -> str:
    """Ask for the output directory, creating it when it does not exist."""
    print("Enter absolute path for saving emails: ")
    dir_path = read_user_input(stream)
    if os.path.exists(dir_path):
        log.info("Directory exists: %s", dir_path)
    else:
        log.info("Directory doesn't exist. Creating: %s", dir_path)
        try:
            os.makedirs(dir_path, exist_ok=True)
        except OSError as exc:
            raise InputError(exc) from exc
    return dir_path


def prompt_imap_config(stream: TextIO | None = None) -> ImapConfig:
    """Ask for address, password and directory in turn."""
    return ImapConfig(
        email=prompt_email(stream),
        password=prompt_password(stream),
        dir_path=prompt_directory_path(stream),
    )