"""The chat client: sends typed lines to the server and prints its answers."""

from __future__ import annotations

import asyncio
import contextlib
import logging
import sys
from typing import Callable, Optional

from .message import HEADER_SIZE, ChatError, Message, ServerResponseType, decode_header

logger = logging.getLogger(__name__)

MessageHandler = Callable[[Message], None]

USAGE = "Usage: chat_client <host> <port>"


def _print_message(message: Message) -> None:
    print(message, flush=True)


class ChatClient:
    """A connection to the chat server."""

    def __init__(
        self,
        host: str,
        port: int | str,
        on_message: Optional[MessageHandler] = None,
    ) -> None:
        self.host = host
        self.port = port
        self._on_message = on_message if on_message is not None else _print_message
        self._reader: Optional[asyncio.StreamReader] = None
        self._writer: Optional[asyncio.StreamWriter] = None
        self._read_task: Optional[asyncio.Task[None]] = None

    async def connect(self) -> None:
        """Open the connection and start handling server messages."""
        if self._writer is not None:
            raise ChatError("client is already connected")
        self._reader, self._writer = await asyncio.open_connection(self.host, self.port)
        self._read_task = asyncio.create_task(self._read_loop())

    def write(self, message: Message) -> None:
        """Queue a message for sending to the server."""
        if self._writer is None:
            raise ChatError("client is not connected")
        if self._writer.is_closing():
            logger.debug("Connection closed, dropping: %s", message)
            return
        self._writer.write(message.encode())

    async def close(self) -> None:
        """Close the connection and stop reading."""
        writer = self._writer
        if writer is None:
            return
        if not writer.is_closing():
            writer.close()
        with contextlib.suppress(ConnectionError, OSError):
            await writer.wait_closed()
        task = self._read_task
        if task is not None and not task.done():
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task

    async def _read_loop(self) -> None:
        assert self._reader is not None
        try:
            while True:
                header = await self._reader.readexactly(HEADER_SIZE)
                kind, size = decode_header(header, ServerResponseType)
                body = await self._reader.readexactly(size)
                self._on_message(Message(kind, body))
        except (asyncio.IncompleteReadError, ConnectionError, ChatError) as error:
            logger.debug("Connection ended: %s", error)
        finally:
            if self._writer is not None and not self._writer.is_closing():
                self._writer.close()


async def _run(host: str, port: str) -> None:
    client = ChatClient(host, port)
    await client.connect()
    loop = asyncio.get_running_loop()
    try:
        while True:
            line = await loop.run_in_executor(None, sys.stdin.readline)
            if not line:
                break
            client.write(Message().append(line.rstrip("\n")))
    finally:
        await client.close()


def main(argv: Optional[list[str]] = None) -> int:
    """Connect to ``<host> <port>`` and chat using standard input and output."""
    args = sys.argv[1:] if argv is None else list(argv)
    if len(args) != 2:
        print(USAGE, file=sys.stderr)
        return 1
    host, port = args
    try:
        asyncio.run(_run(host, port))
    except KeyboardInterrupt:
        pass
    except Exception as error:
        print(error, file=sys.stderr)
    return 0