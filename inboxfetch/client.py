"""Asynchronous IMAP client that downloads every message in the inbox."""

from __future__ import annotations

import asyncio
import contextlib
import logging
import ssl
from collections.abc import AsyncIterator, Awaitable, Callable, Iterator
from dataclasses import dataclass, field

from inboxfetch.config import ImapConfig
from inboxfetch.errors import (
    AuthenticationError,
    ClientError,
    FileError,
    ImapConnectionError,
    ImapError,
    TlsConnectionFailedError,
)

log = logging.getLogger(__name__)

BATCH_SIZE = 500
BATCH_LAUNCH_DELAY = 0.05
READ_CHUNK = 4096
GREETING_LIMIT = 1024
TLS_SERVER_NAME = "imap.gmail.com"

LOGIN_TAG = "A001"
SELECT_TAG = "A002"
FETCH_TAG = "A003"
SELECT_COMMAND = b"A002 SELECT INBOX\r\n"
LOGOUT_COMMAND = b"A999 LOGOUT\r\n"

Connection = tuple[asyncio.StreamReader, asyncio.StreamWriter]
Connector = Callable[[str], Awaitable[Connection]]


def _parse_uint(text: str, bits: int) -> int | None:
    """Parse an unsigned decimal that fits in ``bits`` bits, or return None."""
    digits = text[1:] if text.startswith("+") else text
    if not digits or not (digits.isascii() and digits.isdigit()):
        return None
    value = int(digits)
    return value if value < 1 << bits else None


def batch_ranges(email_count: int, batch_size: int = BATCH_SIZE) -> Iterator[tuple[int, int]]:
    """Yield inclusive ``(start, end)`` message ranges covering 1..email_count."""
    for start in range(1, email_count + 1, batch_size):
        yield start, min(start + batch_size - 1, email_count)


async def create_tls_connection(server: str) -> Connection:
    """Open a TLS connection to ``host:port``."""
    host, sep, port_text = server.rpartition(":")
    port = _parse_uint(port_text, 16) if sep else None
    if not host or port is None:
        raise ImapConnectionError(f"invalid server address {server!r}")
    context = ssl.create_default_context()
    try:
        return await asyncio.open_connection(
            host, port, ssl=context, server_hostname=TLS_SERVER_NAME
        )
    except ssl.SSLError as exc:
        raise TlsConnectionFailedError(exc) from exc
    except OSError as exc:
        raise ImapConnectionError(exc) from exc


async def _send(writer: asyncio.StreamWriter, data: bytes) -> None:
    try:
        writer.write(data)
        await writer.drain()
    except OSError as exc:
        raise ImapConnectionError(exc) from exc


async def _read_line(reader: asyncio.StreamReader) -> str:
    try:
        raw = await reader.readuntil(b"\r\n")
    except asyncio.IncompleteReadError as exc:
        raise ImapConnectionError("connection closed by server") from exc
    except (asyncio.LimitOverrunError, OSError) as exc:
        raise ImapConnectionError(exc) from exc
    return raw.decode("utf-8", errors="replace")


@contextlib.asynccontextmanager
async def _session(connect: Connector, server: str) -> AsyncIterator[Connection]:
    reader, writer = await connect(server)
    try:
        yield reader, writer
    finally:
        writer.close()
        with contextlib.suppress(Exception):
            await writer.wait_closed()


async def authenticate(
    reader: asyncio.StreamReader, writer: asyncio.StreamWriter, email: str, password: str
) -> None:
    """Consume the greeting and log in, raising when the server refuses."""
    try:
        await reader.read(GREETING_LIMIT)
    except OSError as exc:
        raise ImapConnectionError(exc) from exc
    await _send(writer, f"{LOGIN_TAG} LOGIN {email} {password}\r\n".encode())
    while True:
        line = await _read_line(reader)
        if line.startswith(LOGIN_TAG):
            if "OK" in line:
                return
            raise AuthenticationError("Authentication failed")


async def read_email_count(reader: asyncio.StreamReader) -> int:
    """Read the SELECT reply and return the count from its EXISTS line."""
    count = 0
    while True:
        line = await _read_line(reader)
        if "EXISTS" in line:
            parts = line.split()
            if len(parts) >= 2 and (value := _parse_uint(parts[1], 32)) is not None:
                count = value
        if line.startswith(SELECT_TAG):
            if "OK" in line:
                return count
            raise ImapError("Failed to select INBOX")


async def select_inbox(reader: asyncio.StreamReader, writer: asyncio.StreamWriter) -> int:
    """Select INBOX and return the message count the server announced."""
    await _send(writer, SELECT_COMMAND)
    return await read_email_count(reader)


async def logout(writer: asyncio.StreamWriter) -> None:
    """Send the LOGOUT command."""
    await _send(writer, LOGOUT_COMMAND)


@dataclass
class _BatchParser:
    """Splits a FETCH reply into message bodies and writes each to a file."""

    dir_path: str
    line: bytearray = field(default_factory=bytearray)
    body: bytearray = field(default_factory=bytearray)
    body_size: int = 0
    body_read: int = 0
    reading_body: bool = False
    expecting_paren: bool = False
    email_id: int = 0
    saved: int = 0

    def feed(self, chunk: bytes) -> bool:
        """Consume a chunk; return True once the tagged OK has been seen."""
        pos, size = 0, len(chunk)
        while pos < size:
            if self.reading_body:
                take = max(self.body_size - self.body_read, 1)
                piece = chunk[pos : pos + take]
                self.body += piece
                self.body_read += len(piece)
                pos += len(piece)
                if self.body_read >= self.body_size:
                    self._save()
            elif self.expecting_paren:
                idx = chunk.find(b")", pos)
                if idx < 0:
                    pos = size
                else:
                    pos = idx + 1
                    self.expecting_paren = False
            else:
                idx = chunk.find(b"\n", pos)
                if idx < 0:
                    self.line += chunk[pos:]
                    pos = size
                    continue
                self.line += chunk[pos : idx + 1]
                pos = idx + 1
                if self.line.endswith(b"\r\n"):
                    if self._handle_line():
                        return True
                    self.line.clear()
        return False

    def _handle_line(self) -> bool:
        text = self.line.decode("utf-8", errors="replace").strip()
        if "FETCH" in text and "{" in text:
            id_start, id_end = text.find("* "), text.find(" FETCH")
            if id_start >= 0 and id_end >= 0:
                email_id = _parse_uint(text[id_start + 2 : id_end], 32)
                if email_id is not None:
                    self.email_id = email_id
            size_start, size_end = text.find("{"), text.find("}")
            if size_start >= 0 and size_end >= 0:
                body_size = _parse_uint(text[size_start + 1 : size_end], 64)
                if body_size is not None:
                    self.body_size = body_size
                    self.body_read = 0
                    self.reading_body = True
                    self.body.clear()
        elif text.startswith(FETCH_TAG):
            if "OK" in text:
                return True
            if "BAD" in text or "NO" in text:
                raise ImapError(f"FETCH command failed: {text}")
        return False

    def _save(self) -> None:
        filename = f"{self.dir_path}/email_{self.email_id:05d}.eml"
        try:
            with open(filename, "wb") as handle:
                handle.write(self.body)
        except OSError as exc:
            raise FileError(exc) from exc
        log.info("Saved email %d to %s", self.email_id, filename)
        self.saved += 1
        self.reading_body = False
        self.expecting_paren = True
        self.body.clear()


async def process_batch(reader: asyncio.StreamReader, dir_path: str) -> int:
    """Save every message in a FETCH reply under ``dir_path``; return how many."""
    parser = _BatchParser(dir_path)
    while True:
        try:
            chunk = await reader.read(READ_CHUNK)
        except OSError as exc:
            raise ImapConnectionError(exc) from exc
        if not chunk or parser.feed(chunk):
            return parser.saved


async def fetch_email_batch(
    start: int,
    end: int,
    email: str,
    password: str,
    dir_path: str,
    server: str,
    connect: Connector | None = None,
) -> int:
    """Download messages ``start``..``end`` over a fresh connection."""
    async with _session(connect or create_tls_connection, server) as (reader, writer):
        await authenticate(reader, writer, email, password)
        await select_inbox(reader, writer)
        await _send(writer, f"{FETCH_TAG} FETCH {start}:{end} (BODY[])\r\n".encode())
        saved = await process_batch(reader, dir_path)
        await logout(writer)
    return saved


class ImapClient:
    """Downloads a whole inbox using several connections at once."""

    def __init__(
        self, config: ImapConfig, server: str, connect: Connector | None = None
    ) -> None:
        self.config = config
        self.server = server
        self._connect = connect or create_tls_connection

    async def fetch_all_emails(self) -> None:
        """Count the inbox and save every message to the configured directory."""
        print("Gmail IMAP Email Fetcher (Async Version)")
        print("========================================")
        log.info("Using %d concurrent connections", self.config.max_concurrent)

        email_count = await self.get_email_count()
        if email_count == 0:
            print("No emails found in INBOX")
            return
        print(f"Found {email_count} emails in INBOX")

        await self.fetch_emails_concurrently(email_count)
        print(f"Email fetching completed! All emails saved to: {self.config.dir_path}")

    async def get_email_count(self) -> int:
        """Return the number of messages in INBOX."""
        log.info("Connecting to get email count...")
        async with _session(self._connect, self.server) as (reader, writer):
            await authenticate(reader, writer, self.config.email, self.config.password)
            count = await select_inbox(reader, writer)
            await logout(writer)
        return count

    async def fetch_emails_concurrently(self, email_count: int) -> int:
        """Fetch all messages in batches; return how many were saved."""
        semaphore = asyncio.Semaphore(self.config.max_concurrent)
        log.info(
            "Fetching emails in batches of %d with %d concurrent connections...",
            BATCH_SIZE,
            self.config.max_concurrent,
        )
        tasks = []
        for start, end in batch_ranges(email_count):
            tasks.append(asyncio.create_task(self._fetch_batch(semaphore, start, end)))
            await asyncio.sleep(BATCH_LAUNCH_DELAY)

        results = await asyncio.gather(*tasks, return_exceptions=True)
        total = 0
        errors = 0
        for result in results:
            if isinstance(result, BaseException):
                if not isinstance(result, ClientError):
                    log.error("Task join error: %s", result)
                errors += 1
            else:
                total += result

        log.info("Total emails fetched: %d", total)
        if errors:
            log.info("Encountered %d errors during fetching", errors)
        return total

    async def _fetch_batch(self, semaphore: asyncio.Semaphore, start: int, end: int) -> int:
        async with semaphore:
            try:
                count = await fetch_email_batch(
                    start,
                    end,
                    self.config.email,
                    self.config.password,
                    self.config.dir_path,
                    self.server,
                    self._connect,
                )
            except ClientError as exc:
                log.error("Failed to fetch emails %d to %d: %s", start, end, exc)
                raise
        log.info("Successfully fetched emails %d to %d (%d emails)", start, end, count)
        return count