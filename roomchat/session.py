"""A connected client on the server side: reads its requests and sends it answers."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any, Optional

from .auth import AuthManager
from .message import HEADER_SIZE, ChatError, ChatMessageType, Message, decode_header
from .parser import parse_client_message
from .participant import Participant

if TYPE_CHECKING:
    from .room_manager import RoomManager
    from .rooms import Room

logger = logging.getLogger(__name__)


class Session(Participant):
    """One client connection, taking part in exactly one room at a time."""

    def __init__(
        self,
        reader: Optional[asyncio.StreamReader],
        writer: Any,
        room_manager: "RoomManager",
        auth_manager: Optional[AuthManager] = None,
    ) -> None:
        super().__init__()
        self._reader = reader
        self._writer = writer
        self.room_manager = room_manager
        self.auth_manager = auth_manager
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    async def start(self) -> None:
        """Enter the lobby and handle requests until the connection ends."""
        self.set_room(self.room_manager.lobby)
        try:
            while not self._closed:
                message = await self._read_message()
                if message is None:
                    break
                if self.room is None:
                    break
                self.room.on_message_received(self, parse_client_message(message))
                await self._drain()
        except ChatError as error:
            logger.warning("Dropping session: %s", error)
        finally:
            self.close()

    def deliver(self, message: Message) -> None:
        """Queue a server message for sending to the client."""
        if self._closed or self._writer.is_closing():
            logger.debug("Not delivering to a closed session: %s", message)
            return
        self._writer.write(message.encode())

    def set_room(self, room: "Room") -> None:
        if self.room is not None:
            self.room.leave(self)
        self.room = room
        room.join(self)

    def close(self) -> None:
        """Leave the current room and close the connection."""
        if self._closed:
            return
        self._closed = True
        if self.room is not None:
            self.room.leave(self)
            self.room = None
        if not self._writer.is_closing():
            self._writer.close()

    async def _read_message(self) -> Optional[Message]:
        if self._reader is None:
            raise ChatError("session has no reader")
        try:
            header = await self._reader.readexactly(HEADER_SIZE)
        except (asyncio.IncompleteReadError, ConnectionError):
            logger.info("Error read header")
            return None
        kind, size = decode_header(header, ChatMessageType)
        try:
            body = await self._reader.readexactly(size)
        except (asyncio.IncompleteReadError, ConnectionError):
            logger.info("Error read body")
            return None
        return Message(kind, body)

    async def _drain(self) -> None:
        if self._closed or self._writer.is_closing():
            return
        try:
            await self._writer.drain()
        except ConnectionError:
            logger.info("Error write")
            self.close()