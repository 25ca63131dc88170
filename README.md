# inboxfetch

`inboxfetch` downloads every message in the INBOX of a Gmail mailbox over IMAP
and writes each one to its own `.eml` file. It splits the mailbox into batches
of 500 messages. Each batch uses its own TLS connection, and up to five batches
run at the same time.

It needs nothing beyond the Python standard library (Python 3.10 or later).

## Installation

```
pip install .
```

The tests need the `test` extra:

```
pip install ".[test]"
pytest
```

## Usage

Run the command:

```
inboxfetch
```

The command takes no options apart from `--help`. It asks for three things,
one per line:

1. your Gmail address,
2. an app password (this is not your normal account password),
3. a path to a directory for the messages. The directory is created if it
   does not exist.

All whitespace in what you type is removed. The address must contain both `@`
and `.`. If an answer is empty or the address is not valid, the command prints
`Failed to get IMAP configuration. Please try again.` and stops.

The command then connects to `imap.gmail.com:993`. First it logs in once to
read the message count from the `SELECT INBOX` reply. Then it fetches the
messages in batches. Each message is saved as `email_NNNNN.eml`, where `NNNNN`
is its sequence number in the mailbox, padded with zeros to at least five
digits. For example, message 42 is saved as `email_00042.eml`.

If a batch fails, the failure is logged and the other batches carry on. If
logging in or counting the messages fails, the command prints
`Failed to fetch emails. Please try again.` Otherwise it ends with
`Email fetching completed successfully`. The exit status is 0 in every case.

Only warnings and errors are logged.

## Using it from Python

```python
import asyncio

from inboxfetch.client import ImapClient
from inboxfetch.config import ImapConfig

password = "password"
config = ImapConfig(
    email="someone@example.com",
    password=password,
    dir_path="/tmp/mail",
)
client = ImapClient(config, "imap.gmail.com:993")
asyncio.run(client.fetch_all_emails())
```

`ImapConfig.max_concurrent` sets how many batch connections may be open at
once. It defaults to 5.

`ImapClient` takes an optional `connect` argument. This is an async callable
that receives the server string and returns an `asyncio` reader and writer
pair. By default it is `inboxfetch.client.create_tls_connection`. That function
expects the server as `host:port`, and it always checks the server certificate
against the name `imap.gmail.com`.

The client methods are:

- `get_email_count()` returns the number of messages in INBOX.
- `fetch_emails_concurrently(count)` returns how many messages were saved.

The lower-level coroutines are also in `inboxfetch.client`:

- `authenticate`
- `select_inbox`
- `read_email_count`
- `process_batch`
- `fetch_email_batch`
- `logout`

`batch_ranges(count, batch_size)` yields the inclusive `(start, end)` ranges
that are used for the batches.

`inboxfetch.config` provides the prompts:

- `prompt_email`
- `prompt_password`
- `prompt_directory_path`
- `prompt_imap_config`

Each of them takes an optional text stream to read from instead of standard
input.

Every error the package raises is a subclass of `inboxfetch.errors.ClientError`.
Examples are `AuthenticationError`, `ImapError`, `ImapConnectionError`,
`FileError` and `EmptyInputError`.

## What it does not do

- It reads INBOX only. Other folders and labels are not fetched.
- The command always uses `imap.gmail.com:993`. It has no options for
  another server, a port or the number of connections.
- Every run downloads every message again and overwrites files that have the
  same name. Nothing is kept to track what was already downloaded.
- Files are named by sequence number, not by UID. After messages are deleted
  from the mailbox, a later run can give a different file the same name.