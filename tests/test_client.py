import asyncio
import socket
import struct

import pytest

from roomchat.client import ChatClient, main
from roomchat.message import ChatError, Message, ServerResponseType
from roomchat.room_manager import RoomManager
from roomchat.server import Server

TIMEOUT = 5


@pytest.mark.asyncio
async def test_client_receives_answers():
    server = Server("127.0.0.1", 0)
    await server.start()
    queue = asyncio.Queue()
    client = ChatClient("127.0.0.1", server.port, on_message=queue.put_nowait)
    try:
        await client.connect()
        client.write(Message().append("/room"))
        answer = await asyncio.wait_for(queue.get(), TIMEOUT)
        assert answer.kind == ServerResponseType.OK
        assert str(answer) == f"[OK] {RoomManager.LOBBY_NAME}"
    finally:
        await client.close()
        await asyncio.wait_for(server.close(), TIMEOUT)


@pytest.mark.asyncio
async def test_client_keeps_message_order():
    server = Server("127.0.0.1", 0)
    await server.start()
    queue = asyncio.Queue()
    client = ChatClient("127.0.0.1", server.port, on_message=queue.put_nowait)
    try:
        await client.connect()
        for text in ("first", "second", "third"):
            client.write(Message().append(text))
        received = [(await asyncio.wait_for(queue.get(), TIMEOUT)).text() for _ in range(3)]
        assert received == ["first", "second", "third"]
    finally:
        await client.close()
        await asyncio.wait_for(server.close(), TIMEOUT)


def test_write_before_connect_raises():
    client = ChatClient("127.0.0.1", 1)
    with pytest.raises(ChatError):
        client.write(Message().append("hello"))


@pytest.mark.asyncio
async def test_client_closes_on_unknown_response_kind():
    loop = asyncio.get_running_loop()
    seen = loop.create_future()

    async def handle(reader, writer):
        writer.write(struct.pack("<II", 99, 0))
        await writer.drain()
        seen.set_result(await reader.read())
        writer.close()

    server = await asyncio.start_server(handle, "127.0.0.1", 0)
    port = server.sockets[0].getsockname()[1]
    received = []
    client = ChatClient("127.0.0.1", port, on_message=received.append)
    try:
        await client.connect()
        assert await asyncio.wait_for(seen, TIMEOUT) == b""
        assert received == []
    finally:
        await client.close()
        server.close()
        await asyncio.wait_for(server.wait_closed(), TIMEOUT)


@pytest.mark.parametrize("argv", [[], ["localhost"], ["localhost", "5555", "extra"]])
def test_main_usage(argv, capsys):
    assert main(argv) == 1
    assert "Usage: chat_client <host> <port>" in capsys.readouterr().err


def test_main_reports_connection_failure(capsys):
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as unused:
        unused.bind(("127.0.0.1", 0))
        port = unused.getsockname()[1]
        assert main(["127.0.0.1", str(port)]) == 0
    assert capsys.readouterr().err.strip()