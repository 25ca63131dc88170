"""Exceptions raised while configuring the client and fetching mail."""

from __future__ import annotations


class ClientError(Exception):
    """Base class for every error raised by the mail fetcher."""


class _DetailedError(ClientError):
    """An error whose message is a fixed prefix followed by a detail."""

    prefix = ""

    def __init__(self, detail: object) -> None:
        self.detail = detail
        super().__init__(f"{self.prefix}: {detail}")


class InputError(_DetailedError):
    """Reading or validating what the user typed failed."""

    prefix = "Failed to read user input"


class EmptyInputError(ClientError):
    """The user entered nothing for a required field."""

    def __init__(self, field: str) -> None:
        self.field = field
        super().__init__(f"Empty input provided for {field}")


class UserCancelledError(ClientError):
    """The user abandoned the operation."""

    def __init__(self) -> None:
        super().__init__("User cancelled operation")


class ImapError(_DetailedError):
    """The IMAP server answered a command with a failure."""

    prefix = "IMAP server responded with error"


class TlsError(_DetailedError):
    """A TLS-level problem occurred."""

    prefix = "TLS error"


class ImapConnectionError(_DetailedError):
    """The connection to the IMAP server could not be made or broke."""

    prefix = "Failed to connect to IMAP server"


class AuthenticationError(_DetailedError):
    """The server rejected the login."""

    prefix = "Authentication failed"


class InvalidDnsNameError(_DetailedError):
    """The server name is not usable for TLS verification."""

    prefix = "Invalid DNS name"


class TlsConnectionFailedError(ClientError):
    """The TLS handshake did not complete."""

    def __init__(self, cause: object | None = None) -> None:
        self.cause = cause
        super().__init__("Failed to establish TLS connection")


class ParseError(ClientError):
    """The message count in a server reply could not be understood."""

    def __init__(self) -> None:
        super().__init__("Failed to parse email count")


class DirectoryError(_DetailedError):
    """The output directory could not be created."""

    prefix = "Directory creation failed"


class FileError(_DetailedError):
    """Writing a message file failed."""

    prefix = "File operation failed"


class JoinError(_DetailedError):
    """A background fetch task ended abnormally."""

    prefix = "Join error"