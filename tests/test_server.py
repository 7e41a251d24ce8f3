import asyncio
import socket

import pytest

from roomchat.message import HEADER_SIZE, Message, ServerResponseType, decode_header
from roomchat.room_manager import RoomManager
from roomchat.server import Server, main

TIMEOUT = 5


async def send(writer, text):
    writer.write(Message().append(text).encode())
    await writer.drain()


async def receive(reader):
    header = await asyncio.wait_for(reader.readexactly(HEADER_SIZE), TIMEOUT)
    kind, size = decode_header(header, ServerResponseType)
    body = await asyncio.wait_for(reader.readexactly(size), TIMEOUT)
    return Message(kind, body)


@pytest.mark.asyncio
async def test_server_answers_on_bound_port():
    server = Server("127.0.0.1", 0)
    await server.start()
    try:
        assert server.port > 0
        reader, writer = await asyncio.open_connection("127.0.0.1", server.port)
        await send(writer, "/room")
        answer = await receive(reader)
        assert answer == Message(ServerResponseType.OK, RoomManager.LOBBY_NAME.encode())
        writer.close()
    finally:
        await asyncio.wait_for(server.close(), TIMEOUT)


@pytest.mark.asyncio
async def test_clients_share_rooms():
    server = Server("127.0.0.1", 0)
    await server.start()
    try:
        reader_a, writer_a = await asyncio.open_connection("127.0.0.1", server.port)
        reader_b, writer_b = await asyncio.open_connection("127.0.0.1", server.port)
        await send(writer_a, "/create shared")
        assert (await receive(reader_a)).kind == ServerResponseType.OK
        await send(writer_b, "/list")
        assert (await receive(reader_b)).text() == "[shared]"
        assert server.room_manager.list_rooms() == ["shared"]
        writer_a.close()
        writer_b.close()
    finally:
        await asyncio.wait_for(server.close(), TIMEOUT)


@pytest.mark.asyncio
async def test_close_disconnects_clients():
    server = Server("127.0.0.1", 0)
    await server.start()
    reader, writer = await asyncio.open_connection("127.0.0.1", server.port)
    await send(writer, "/room")
    await receive(reader)
    await asyncio.wait_for(server.close(), TIMEOUT)
    assert await asyncio.wait_for(reader.read(), TIMEOUT) == b""
    assert server.room_manager.lobby.participants == frozenset()
    writer.close()


def test_main_rejects_bad_port():
    with pytest.raises(SystemExit):
        main(["--port", "not-a-port"])


def test_main_reports_address_in_use(capsys):
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as busy:
        busy.bind(("127.0.0.1", 0))
        busy.listen()
        port = busy.getsockname()[1]
        assert main(["--host", "127.0.0.1", "--port", str(port)]) == 0
    assert capsys.readouterr().err.startswith("Exception:")