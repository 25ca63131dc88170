import pytest

from inboxfetch.errors import (
    AuthenticationError,
    ClientError,
    DirectoryError,
    EmptyInputError,
    FileError,
    ImapConnectionError,
    ImapError,
    InputError,
    InvalidDnsNameError,
    JoinError,
    ParseError,
    TlsConnectionFailedError,
    TlsError,
    UserCancelledError,
)


@pytest.mark.parametrize(
    ("cls", "prefix"),
    [
        (InputError, "Failed to read user input"),
        (ImapError, "IMAP server responded with error"),
        (TlsError, "TLS error"),
        (ImapConnectionError, "Failed to connect to IMAP server"),
        (AuthenticationError, "Authentication failed"),
        (InvalidDnsNameError, "Invalid DNS name"),
        (DirectoryError, "Directory creation failed"),
        (FileError, "File operation failed"),
        (JoinError, "Join error"),
    ],
)
def test_detailed_messages(cls, prefix):
    err = cls("details here")
    assert str(err) == f"{prefix}: details here"
    assert err.detail == "details here"
    assert isinstance(err, ClientError)


def test_empty_input_message_and_field():
    err = EmptyInputError("password")
    assert str(err) == "Empty input provided for password"
    assert err.field == "password"


def test_fixed_messages():
    assert str(UserCancelledError()) == "User cancelled operation"
    assert str(ParseError()) == "Failed to parse email count"
    assert str(TlsConnectionFailedError()) == "Failed to establish TLS connection"


def test_tls_connection_failed_keeps_cause():
    cause = OSError("handshake")
    err = TlsConnectionFailedError(cause)
    assert err.cause is cause


def test_input_error_wraps_os_error():
    err = InputError(OSError("boom"))
    assert str(err) == "Failed to read user input: boom"


def test_errors_catchable_as_client_error():
    err = ImapError("Failed to select INBOX")
    assert str(err) == "IMAP server responded with error: Failed to select INBOX"
    assert err.detail == "Failed to select INBOX"
    with pytest.raises(ClientError) as info:
        raise err
    assert info.value is err