"""Keeps the lobby and the set of chat rooms, and moves participants between them."""

from __future__ import annotations

import threading

from .commands import ChatRoomCommandHandler, LobbyCommandHandler
from .message import ServerResponseType
from .participant import Participant
from .rooms import ChatRoom, Lobby


class RoomManager:
    """Owns the lobby and every chat room."""

    LOBBY_NAME = "!Lobby"

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._rooms: dict[str, ChatRoom] = {}
        self.lobby = Lobby(self.LOBBY_NAME)
        self.lobby.set_command_handler(LobbyCommandHandler(self))

    def create_room(self, room_id: str, creator: Participant) -> ServerResponseType:
        """Create a chat room owned by ``creator``."""
        if not room_id:
            return ServerResponseType.INCORRECT_BODY
        with self._lock:
            if room_id in self._rooms:
                return ServerResponseType.ALREADY_EXISTS
            room = ChatRoom(room_id, creator)
            room.set_command_handler(ChatRoomCommandHandler(self))
            self._rooms[room_id] = room
        return ServerResponseType.OK

    def delete_room(self, room_id: str, deleter: Participant) -> ServerResponseType:
        """Delete a room its owner asks to delete; its members go to the lobby."""
        if not room_id:
            return ServerResponseType.INCORRECT_BODY
        with self._lock:
            room = self._rooms.get(room_id)
            if room is None:
                return ServerResponseType.NOT_FOUND
            if not room.is_owner(deleter):
                return ServerResponseType.FORBIDDEN
            for participant in room.participants:
                participant.set_room(self.lobby)
            del self._rooms[room_id]
        return ServerResponseType.OK

    def move_participant_to_room(
        self, participant: Participant, room_id: str
    ) -> ServerResponseType:
        """Move ``participant`` into the chat room ``room_id``."""
        if not room_id:
            return ServerResponseType.INCORRECT_BODY
        with self._lock:
            room = self._rooms.get(room_id)
            if room is None:
                return ServerResponseType.NOT_FOUND
            participant.set_room(room)
        return ServerResponseType.OK

    def list_rooms(self) -> list[str]:
        """Return the names of all chat rooms."""
        with self._lock:
            return list(self._rooms)