"""Rooms that hold participants and dispatch their messages to a command handler."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections import deque
from typing import Any, Optional

from .message import ChatError, Message
from .participant import Participant

MAX_RECENT_MESSAGES = 100


class Room(ABC):
    """A named place where participants' messages are handled."""

    def __init__(self, name: str) -> None:
        self.name = name
        self._participants: set[Participant] = set()
        self._command_handler: Optional[Any] = None

    @property
    def participants(self) -> frozenset[Participant]:
        """A snapshot of the participants currently in the room."""
        return frozenset(self._participants)

    @abstractmethod
    def join(self, participant: Participant) -> None:
        """Add a participant to the room."""

    @abstractmethod
    def leave(self, participant: Participant) -> None:
        """Remove a participant from the room."""

    @abstractmethod
    def is_owner(self, participant: Participant) -> bool:
        """Tell whether ``participant`` owns the room."""

    def on_message_received(self, sender: Participant, message: Message) -> None:
        if self._command_handler is None:
            raise ChatError(f"room {self.name!r} has no command handler")
        self._command_handler.process(message, sender)

    def set_command_handler(self, handler: Any) -> None:
        self._command_handler = handler
        handler.init_handlers()


class ChatRoom(Room):
    """A room created by a participant that keeps a short history."""

    def __init__(self, name: str, creator: Participant) -> None:
        super().__init__(name)
        self.creator = creator
        self._recent: deque[Message] = deque(maxlen=MAX_RECENT_MESSAGES)

    def join(self, participant: Participant) -> None:
        self._participants.add(participant)
        for message in list(self._recent):
            participant.deliver(message)

    def leave(self, participant: Participant) -> None:
        self._participants.discard(participant)

    def is_owner(self, participant: Participant) -> bool:
        return participant is self.creator

    def deliver_all(self, message: Message) -> None:
        """Remember ``message`` and send it to everyone in the room."""
        self._recent.append(message)
        for participant in list(self._participants):
            participant.deliver(message)


class Lobby(Room):
    """The room every participant starts in; nobody owns it."""

    def join(self, participant: Participant) -> None:
        self._participants.add(participant)

    def leave(self, participant: Participant) -> None:
        self._participants.discard(participant)

    def is_owner(self, participant: Participant) -> bool:
        return False