# roomchat

roomchat is a small chat system that runs over TCP. It has an asyncio server and a
line-based console client. Everyone who connects starts in a lobby. From the lobby you
can create, list, join and delete named chat rooms. Text sent inside a room goes to
everyone in that room, the sender included. When you join a room, the server first sends
you that room's most recent messages, up to 100 of them.

## Installation

```
pip install .
```

To install the test dependencies as well:

```
pip install ".[test]"
```

## Running the server

```
roomchat-server
```

By default the server listens on port 5555 on all IPv4 interfaces (`0.0.0.0`). You can
change this with these options:

```
roomchat-server --host 127.0.0.1 --port 6000
```

Stop the server with Ctrl-C.

## Running the client

```
roomchat-client <host> <port>
```

Example:

```
roomchat-client localhost 5555
```

Each line you type is sent to the server. The client prints each reply on its own line,
in the form `[label] text`. The label is `OK` for successful replies, and for errors it
is a short description such as `not found`, `already exist`, `forbidden`,
`incorrect body`, `invalid context` or `unknown request`. End the input (Ctrl-D) to
disconnect. If you give the client the wrong number of arguments, it prints a usage line
and exits with status 1.

## Commands

A line that does not start with `/` is chat text. In the lobby the server echoes it back
to you. In a room the server sends it to everyone in that room.

| Command             | In the lobby                          | In a room                 |
|---------------------|---------------------------------------|---------------------------|
| `/create <room>`    | create a room that you own            | rejected: invalid context |
| `/delete <room>`    | delete a room you own                 | rejected: invalid context |
| `/join <room>`      | move into a room                      | rejected: invalid context |
| `/list`             | list all rooms, e.g. `[a, b]`         | rejected: invalid context |
| `/room`             | show the current room (`!Lobby`)      | show the current room     |
| `/quit`             | go back to the lobby                  | go back to the lobby      |
| `/login`, `/logout` | answered with `unknown request`       | same                      |
| any other `/word`   | answered with `unknown request`       | same                      |

If `/create`, `/delete` or `/join` fails, the reply carries the room name. For example,
`/join nowhere` gets `[not found] nowhere`. If you leave out the room name, the reply is
`incorrect body`. Only the creator of a room can delete it. When a room is deleted,
everyone in it is moved back to the lobby.

`/register` is recognised as a message kind, but no room handles it, and the server
closes the connection of any client that sends it.

## Wire format

Every message is an 8-byte header followed by a body. The header holds two unsigned
32-bit little-endian integers: the message kind, and then the length of the body. The
body is UTF-8 text. The client sends `ChatMessageType` kinds, and the server answers with
`ServerResponseType` kinds. Both enums are in `roomchat.message`. Each side closes the
connection if a header carries a kind it does not know.

## Using it as a library

```python
from roomchat.message import ChatMessageType, Message
from roomchat.parser import parse_client_message

msg = Message(ChatMessageType.TEXT)
msg.append("/join general")
parsed = parse_client_message(msg)
assert parsed.kind is ChatMessageType.JOIN
assert parsed.text() == "general"
```

The main building blocks are:

- `roomchat.message`: `Message` with its `encode()` method, `decode_header`, `split`,
  `type_from_string` and `describe`.
- `roomchat.rooms` and `roomchat.room_manager`: `Lobby`, `ChatRoom` and `RoomManager`.
- `roomchat.commands`: the per-room command tables.
- `roomchat.server.Server`: an async server with `start()`, `serve_forever()` and
  `close()`.
- `roomchat.client.ChatClient`: an async client with `connect()`, `write()` and
  `close()`. You can pass it an `on_message` callback to receive replies instead of
  printing them.

## What it does not do

- There are no user accounts in the chat protocol. `roomchat.auth.SimpleAuthManager` can
  register and check logins and passwords in memory, but no command uses it, and
  `/login` and `/logout` are not implemented.
- Nothing is stored on disk. Rooms, their recent messages and any registered users exist
  only while the server process runs.
- Connections are plain TCP, without encryption.