import asyncio
import io
import sys
from unittest.mock import AsyncMock, patch

from inboxfetch.cli import main

EMAIL = "user@example.com"
MESSAGES = [b"Subject: one\r\n\r\nHi\r\n", b"Subject: two\r\n\r\nThere\r\n"]


class FakeWriter:
    def __init__(self, server, reader):
        self.server = server
        self.reader = reader

    def write(self, data):
        self.server.respond(bytes(data), self.reader)

    async def drain(self):
        return None

    def close(self):
        return None

    async def wait_closed(self):
        return None


class FakeServer:
    def __init__(self, messages):
        self.messages = messages
        self.calls = []

    async def open_connection(self, host, port, **kwargs):
        self.calls.append((host, port, kwargs["server_hostname"]))
        reader = asyncio.StreamReader()
        reader.feed_data(b"* OK ready\r\n")
        return reader, FakeWriter(self, reader)

    def respond(self, data, reader):
        _, verb, *rest = data.decode().split()
        if verb == "LOGIN":
            reader.feed_data(b"A001 OK LOGIN completed\r\n")
        elif verb == "SELECT":
            reader.feed_data(
                f"* {len(self.messages)} EXISTS\r\nA002 OK SELECT completed\r\n".encode()
            )
        elif verb == "FETCH":
            first, last = (int(n) for n in rest[0].split(":"))
            for number in range(first, last + 1):
                body = self.messages[number - 1]
                reader.feed_data(
                    f"* {number} FETCH (BODY[] {{{len(body)}}}\r\n".encode() + body + b")\r\n"
                )
            reader.feed_data(b"A003 OK FETCH completed\r\n")
        elif verb == "LOGOUT":
            reader.feed_eof()


def stdin_with(monkeypatch, directory):
    password = "password"
    text = "\n".join([EMAIL, password, str(directory)]) + "\n"
    monkeypatch.setattr(sys, "stdin", io.StringIO(text))


def test_invalid_configuration_reports_and_exits_cleanly(monkeypatch, capsys):
    monkeypatch.setattr(sys, "stdin", io.StringIO("not-an-address\n"))
    assert main([]) == 0
    assert "Failed to get IMAP configuration. Please try again." in capsys.readouterr().out


def test_connection_failure_reports(monkeypatch, capsys, tmp_path):
    target = tmp_path / "mail"
    stdin_with(monkeypatch, target)
    refused = AsyncMock(side_effect=ConnectionRefusedError("refused"))
    with patch("asyncio.open_connection", new=refused):
        assert main([]) == 0
    assert "Failed to fetch emails. Please try again." in capsys.readouterr().out
    assert target.is_dir()


def test_successful_fetch_saves_messages(monkeypatch, capsys, tmp_path):
    target = tmp_path / "mail"
    stdin_with(monkeypatch, target)
    server = FakeServer(MESSAGES)
    with patch("asyncio.open_connection", new=server.open_connection):
        assert main([]) == 0
    out = capsys.readouterr().out
    assert "Email fetching completed successfully" in out
    assert sorted(p.read_bytes() for p in target.iterdir()) == sorted(MESSAGES)
    assert all(call == ("imap.gmail.com", 993, "imap.gmail.com") for call in server.calls)
    assert len(server.calls) == 2