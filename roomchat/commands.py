"""Commands that answer client requests, and the per-room tables that pick them."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Optional

from .message import ChatError, ChatMessageType, Message, ServerResponseType
from .participant import Participant
from .rooms import ChatRoom

if TYPE_CHECKING:
    from .room_manager import RoomManager


class Command(ABC):
    """Handles one kind of client message on behalf of a sender."""

    def __init__(self, room_manager: Optional["RoomManager"] = None) -> None:
        self.room_manager = room_manager

    @abstractmethod
    def execute(self, message: Message, sender: Participant) -> None:
        """Carry out the request in ``message`` for ``sender``."""

    def _manager(self) -> "RoomManager":
        if self.room_manager is None:
            raise ChatError(f"{type(self).__name__} needs a room manager")
        return self.room_manager


class RoomTextCommand(Command):
    """Broadcasts text to everyone in the sender's chat room."""

    def execute(self, message: Message, sender: Participant) -> None:
        answer = message.converted(ServerResponseType.OK)
        room = sender.room
        if isinstance(room, ChatRoom):
            room.deliver_all(answer)


class LobbyTextCommand(Command):
    """Echoes text sent in the lobby back to its sender."""

    def execute(self, message: Message, sender: Participant) -> None:
        sender.deliver(message.converted(ServerResponseType.OK))


class NotImplementedCommand(Command):
    """Answers requests the server does not support yet."""

    def execute(self, message: Message, sender: Participant) -> None:
        sender.deliver(message.converted(ServerResponseType.UNKNOWN_REQUEST))


class InvalidContextCommand(Command):
    """Answers requests that are not allowed in the current room."""

    def execute(self, message: Message, sender: Participant) -> None:
        sender.deliver(message.converted(ServerResponseType.INVALID_CONTEXT))


class GetNameCommand(Command):
    """Tells the sender the name of the room they are in."""

    def execute(self, message: Message, sender: Participant) -> None:
        answer = Message(ServerResponseType.OK)
        if sender.room is None:
            raise ChatError("sender is not in a room")
        answer.append(sender.room.name)
        sender.deliver(answer)


class QuitCommand(Command):
    """Moves the sender back to the lobby."""

    def execute(self, message: Message, sender: Participant) -> None:
        sender.set_room(self._manager().lobby)
        sender.deliver(Message(ServerResponseType.OK))


class UnknownCommand(Command):
    """Answers commands nobody recognises."""

    def execute(self, message: Message, sender: Participant) -> None:
        sender.deliver(message.converted(ServerResponseType.UNKNOWN_REQUEST))


def _status_answer(status: ServerResponseType, room_id: str) -> Message:
    answer = Message(status)
    if status != ServerResponseType.OK:
        answer.append(room_id)
    return answer


class CreateRoomCommand(Command):
    """Creates a chat room named by the message body."""

    def execute(self, message: Message, sender: Participant) -> None:
        room_id = message.text()
        status = self._manager().create_room(room_id, sender)
        sender.deliver(_status_answer(status, room_id))


class DeleteRoomCommand(Command):
    """Deletes a chat room the sender owns."""

    def execute(self, message: Message, sender: Participant) -> None:
        room_id = message.text()
        status = self._manager().delete_room(room_id, sender)
        sender.deliver(_status_answer(status, room_id))


class JoinRoomCommand(Command):
    """Moves the sender into the chat room named by the message body."""

    def execute(self, message: Message, sender: Participant) -> None:
        room_id = message.text()
        status = self._manager().move_participant_to_room(sender, room_id)
        sender.deliver(_status_answer(status, room_id))


class ListRoomCommand(Command):
    """Sends the sender the names of all chat rooms."""

    def execute(self, message: Message, sender: Participant) -> None:
        rooms = self._manager().list_rooms()
        answer = Message(ServerResponseType.OK)
        answer.append("[" + ", ".join(rooms) + "]")
        sender.deliver(answer)


class CommandFactory(ABC):
    """Chooses the command for each message kind."""

    _commands: dict[ChatMessageType, type[Command]] = {}

    def __init__(self, room_manager: Optional["RoomManager"]) -> None:
        self.room_manager = room_manager

    def create_command(self, kind: ChatMessageType) -> Command:
        """Return a fresh command for ``kind``."""
        try:
            command_class = self._commands[kind]
        except KeyError:
            raise ChatError(f"no command for {ChatMessageType(kind).name}") from None
        return command_class(self.room_manager)


_COMMON_COMMANDS: dict[ChatMessageType, type[Command]] = {
    ChatMessageType.LOGIN: NotImplementedCommand,
    ChatMessageType.LOGOUT: NotImplementedCommand,
    ChatMessageType.ROOM: GetNameCommand,
    ChatMessageType.QUIT: QuitCommand,
    ChatMessageType.UNKNOWN: UnknownCommand,
}


class ChatRoomCommandFactory(CommandFactory):
    """Commands available inside a chat room."""

    _commands = {
        **_COMMON_COMMANDS,
        ChatMessageType.TEXT: RoomTextCommand,
        ChatMessageType.CREATE: InvalidContextCommand,
        ChatMessageType.DELETE: InvalidContextCommand,
        ChatMessageType.JOIN: InvalidContextCommand,
        ChatMessageType.LIST: InvalidContextCommand,
    }

    def create_command(self, kind: ChatMessageType) -> Command:
        return super().create_command(kind)


class LobbyCommandFactory(CommandFactory):
    """Commands available in the lobby."""

    _commands = {
        **_COMMON_COMMANDS,
        ChatMessageType.TEXT: LobbyTextCommand,
        ChatMessageType.CREATE: CreateRoomCommand,
        ChatMessageType.DELETE: DeleteRoomCommand,
        ChatMessageType.JOIN: JoinRoomCommand,
        ChatMessageType.LIST: ListRoomCommand,
    }

    def create_command(self, kind: ChatMessageType) -> Command:
        return super().create_command(kind)


_HANDLED_KINDS = (
    ChatMessageType.TEXT,
    ChatMessageType.LOGIN,
    ChatMessageType.LOGOUT,
    ChatMessageType.CREATE,
    ChatMessageType.DELETE,
    ChatMessageType.JOIN,
    ChatMessageType.LIST,
    ChatMessageType.ROOM,
    ChatMessageType.QUIT,
    ChatMessageType.UNKNOWN,
)


class CommandHandler:
    """Dispatches each message to the command registered for its kind."""

    factory_class: type[CommandFactory] = LobbyCommandFactory

    def __init__(self, room_manager: Optional["RoomManager"]) -> None:
        self.command_factory = self.factory_class(room_manager)
        self._handlers: dict[ChatMessageType, Command] = {}

    def init_handlers(self) -> None:
        """Build the command table."""
        self._handlers = {
            kind: self.command_factory.create_command(kind) for kind in _HANDLED_KINDS
        }

    def process(self, message: Message, sender: Participant) -> None:
        """Run the command for the message's kind."""
        command = self._handlers.get(message.kind)
        if command is None:
            raise ChatError(f"no handler for message kind {message.kind!r}")
        command.execute(message, sender)


class ChatRoomCommandHandler(CommandHandler):
    """Handler used by chat rooms."""

    factory_class = ChatRoomCommandFactory


class LobbyCommandHandler(CommandHandler):
    """Handler used by the lobby."""

    factory_class = LobbyCommandFactory