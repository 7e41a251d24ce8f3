"""Wire messages, message kinds and small text helpers shared by client and server."""

from __future__ import annotations

import struct
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Type, TypeVar, Union

DEFAULT_PORT = 5555

_HEADER = struct.Struct("<II")
HEADER_SIZE = _HEADER.size


class ChatError(Exception):
    """Raised when a message cannot be decoded or handled."""


class ChatMessageType(IntEnum):
    """Kinds of messages a client sends to the server."""

    TEXT = 0
    LOGIN = 1
    LOGOUT = 2
    REGISTER = 3
    CREATE = 4
    DELETE = 5
    JOIN = 6
    LIST = 7
    ROOM = 8
    QUIT = 9
    UNKNOWN = 10


class ServerResponseType(IntEnum):
    """Kinds of messages the server sends back to a client."""

    OK = 0
    INTERNAL_ERROR = 1
    UNKNOWN_REQUEST = 2
    INCORRECT_BODY = 3
    INVALID_CONTEXT = 4
    ALREADY_EXISTS = 5
    NOT_FOUND = 6
    FORBIDDEN = 7
    INCORRECT_LOGIN = 8
    INCORRECT_PASSWORD = 9
    INVALID_CREDENTIALS = 10


MessageKind = Union[ChatMessageType, ServerResponseType]
K = TypeVar("K", ChatMessageType, ServerResponseType)

_COMMAND_NAMES = {
    "login": ChatMessageType.LOGIN,
    "logout": ChatMessageType.LOGOUT,
    "register": ChatMessageType.REGISTER,
    "create": ChatMessageType.CREATE,
    "delete": ChatMessageType.DELETE,
    "join": ChatMessageType.JOIN,
    "list": ChatMessageType.LIST,
    "room": ChatMessageType.ROOM,
    "quit": ChatMessageType.QUIT,
}

_CHAT_DESCRIPTIONS = {
    ChatMessageType.LOGIN: "LOGIN",
    ChatMessageType.LOGOUT: "LOGOUT",
    ChatMessageType.REGISTER: "REGISTER",
    ChatMessageType.CREATE: "CREATE",
    ChatMessageType.DELETE: "DELETE",
    ChatMessageType.JOIN: "JOIN",
    ChatMessageType.LIST: "LIST",
    ChatMessageType.ROOM: "ROOM",
    ChatMessageType.QUIT: "QUIT",
}

_SERVER_DESCRIPTIONS = {
    ServerResponseType.OK: "OK",
    ServerResponseType.ALREADY_EXISTS: "already exist",
    ServerResponseType.FORBIDDEN: "forbidden",
    ServerResponseType.INCORRECT_BODY: "incorrect body",
    ServerResponseType.INTERNAL_ERROR: "internal error",
    ServerResponseType.INVALID_CONTEXT: "invalid context",
    ServerResponseType.NOT_FOUND: "not found",
    ServerResponseType.UNKNOWN_REQUEST: "unknown request",
}


def describe(kind: MessageKind) -> str:
    """Return the display label of a message kind."""
    if isinstance(kind, ServerResponseType):
        return _SERVER_DESCRIPTIONS.get(kind, "UNKNOWN")
    if isinstance(kind, ChatMessageType):
        return _CHAT_DESCRIPTIONS.get(kind, "UNKNOWN")
    return "UNKNOWN"


def type_from_string(text: str) -> ChatMessageType:
    """Map a command word such as ``join`` to its message kind."""
    return _COMMAND_NAMES.get(text, ChatMessageType.UNKNOWN)


def split(text: str, delimiter: str, skip_empty: bool = False) -> list[str]:
    """Split ``text`` on ``delimiter``; optionally drop empty pieces."""
    if not delimiter:
        return [text]
    pieces = text.split(delimiter)
    if skip_empty:
        return [piece for piece in pieces if piece]
    return pieces


@dataclass
class Message:
    """A message: a kind and a body of bytes, framed by a fixed header."""

    kind: MessageKind = ChatMessageType.TEXT
    body: bytes = field(default=b"")

    @property
    def size(self) -> int:
        return len(self.body)

    def append(self, text: str) -> "Message":
        """Append text to the body and return the message itself."""
        self.body = bytes(self.body) + text.encode("utf-8")
        return self

    def text(self) -> str:
        """Return the body as text."""
        return bytes(self.body).decode("utf-8", errors="replace")

    def clear(self) -> None:
        """Empty the body."""
        self.body = b""

    def converted(self, kind: MessageKind) -> "Message":
        """Return a new message of another kind carrying the same body."""
        return Message(kind, bytes(self.body))

    def encode_header(self) -> bytes:
        return _HEADER.pack(int(self.kind), self.size)

    def encode(self) -> bytes:
        return self.encode_header() + bytes(self.body)

    def __str__(self) -> str:
        return f"[{describe(self.kind)}] {self.text()}"


def decode_header(data: bytes, kind_type: Type[K]) -> tuple[K, int]:
    """Decode a header into its kind and body size."""
    if len(data) != HEADER_SIZE:
        raise ChatError(f"header must be {HEADER_SIZE} bytes, got {len(data)}")
    raw_kind, size = _HEADER.unpack(data)
    try:
        kind = kind_type(raw_kind)
    except ValueError:
        raise ChatError(f"unknown {kind_type.__name__} id {raw_kind}") from None
    return kind, size