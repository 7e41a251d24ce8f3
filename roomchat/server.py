"""The chat server: accepts connections and gives each one a session."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from typing import Optional

from .auth import AuthManager, SimpleAuthManager
from .message import DEFAULT_PORT
from .room_manager import RoomManager
from .session import Session

logger = logging.getLogger(__name__)


class Server:
    """Listens for clients; all of them share one room manager and auth manager."""

    def __init__(
        self,
        host: str = "0.0.0.0",
        port: int = DEFAULT_PORT,
        room_manager: Optional[RoomManager] = None,
        auth_manager: Optional[AuthManager] = None,
    ) -> None:
        self.host = host
        self._port = port
        self.room_manager = room_manager if room_manager is not None else RoomManager()
        self.auth_manager = auth_manager if auth_manager is not None else SimpleAuthManager()
        self._server: Optional[asyncio.AbstractServer] = None
        self._sessions: set[Session] = set()

    @property
    def port(self) -> int:
        """The port actually listened on once started."""
        if self._server is not None and self._server.sockets:
            return self._server.sockets[0].getsockname()[1]
        return self._port

    async def start(self) -> None:
        """Start accepting connections."""
        if self._server is None:
            self._server = await asyncio.start_server(self._accept, self.host, self._port)
            logger.info("Listening on %s:%d", self.host, self.port)

    async def serve_forever(self) -> None:
        """Start if needed and accept connections until cancelled."""
        await self.start()
        assert self._server is not None
        await self._server.serve_forever()

    async def close(self) -> None:
        """Stop accepting and drop every connected session."""
        server = self._server
        if server is None:
            return
        server.close()
        for session in list(self._sessions):
            session.close()
        await server.wait_closed()
        self._server = None

    async def _accept(
        self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter
    ) -> None:
        session = Session(reader, writer, self.room_manager, self.auth_manager)
        self._sessions.add(session)
        try:
            await session.start()
        finally:
            self._sessions.discard(session)


def main(argv: Optional[list[str]] = None) -> int:
    """Run the chat server until interrupted."""
    parser = argparse.ArgumentParser(prog="roomchat-server", description="Run the chat server.")
    parser.add_argument("--host", default="0.0.0.0", help="address to listen on")
    parser.add_argument("--port", type=int, default=DEFAULT_PORT, help="port to listen on")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO)
    try:
        asyncio.run(Server(args.host, args.port).serve_forever())
    except KeyboardInterrupt:
        pass
    except Exception as error:
        print(f"Exception: {error}", file=sys.stderr)
    return 0