"""Turns a line typed by a client into a chat message of the right kind."""

from __future__ import annotations

from .message import ChatMessageType, Message, split, type_from_string


def parse_client_message(message: Message) -> Message:
    """Classify a raw client message as text or as a ``/command`` with arguments."""
    content = message.text()
    if not content:
        return Message()

    if not content.startswith("/"):
        return message.converted(ChatMessageType.TEXT)

    command, *arguments = split(content[1:], " ")
    result = Message(type_from_string(command))
    if arguments:
        result.append(" ".join(arguments))
    return result