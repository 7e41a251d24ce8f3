"""The interface every chat participant implements."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Optional

from .message import Message

if TYPE_CHECKING:
    from .rooms import Room


class Participant(ABC):
    """Someone who receives server messages and is in one room at a time."""

    def __init__(self) -> None:
        self.room: Optional["Room"] = None

    @abstractmethod
    def deliver(self, message: Message) -> None:
        """Send a server message to this participant."""

    @abstractmethod
    def set_room(self, room: "Room") -> None:
        """Leave the current room, if any, and join ``room``."""