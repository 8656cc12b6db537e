import socket

import pytest

from awakenhero.geometry import Vec2
from awakenhero.message import Message, MessageTag, NetworkHeroState
from awakenhero.server import MAXCLIENT, TIMEOUT, ClientTable, Server
from awakenhero.textures import HeroPalette


def _address(n):
    return ("127.0.0.1", 40000 + n)


def test_new_address_gets_next_uid_and_known_address_is_found():
    table = ClientTable()
    first, created = table.find_or_insert(_address(1), 1.0)
    assert created and first.uid == 1
    second, created = table.find_or_insert(_address(2), 1.0)
    assert created and second.uid == 2
    again, created = table.find_or_insert(_address(1), 4.0)
    assert again is first and not created
    assert again.last_active == 4.0
    assert len(table) == 2


def test_dead_slot_is_reused_with_fresh_uid():
    table = ClientTable()
    first, _ = table.find_or_insert(_address(1), 0.0)
    table.find_or_insert(_address(2), 0.0)
    first.alive = False
    third, created = table.find_or_insert(_address(1), 0.0)
    assert created
    assert third.uid == 3
    assert {client.uid for client in table} == {2, 3}


def test_table_is_limited_to_maxclient():
    table = ClientTable()
    clients = [table.find_or_insert(_address(n), 0.0)[0] for n in range(MAXCLIENT)]
    with pytest.raises(RuntimeError):
        table.find_or_insert(_address(MAXCLIENT), 0.0)
    clients[5].alive = False
    client, created = table.find_or_insert(_address(MAXCLIENT), 0.0)
    assert created
    assert len(table) == MAXCLIENT


def test_recipients_skip_sender_dead_and_silent_clients():
    table = ClientTable()
    sender, _ = table.find_or_insert(_address(1), 100.0)
    active, _ = table.find_or_insert(_address(2), 100.0)
    silent, _ = table.find_or_insert(_address(3), 100.0 - TIMEOUT - 1)
    gone, _ = table.find_or_insert(_address(4), 100.0)
    gone.alive = False
    assert table.recipients(sender, 100.0) == [active]
    assert not silent.alive


@pytest.fixture
def server():
    srv = Server("127.0.0.1", 0)
    yield srv
    srv.close()


@pytest.fixture
def peers():
    socks = []
    for _ in range(2):
        sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        sock.bind(("127.0.0.1", 0))
        sock.settimeout(1.0)
        socks.append(sock)
    yield socks
    for sock in socks:
        sock.close()


def _receive(sock):
    data, _ = sock.recvfrom(1024)
    return Message.decode(data)


def test_connect_assigns_uid(server, peers):
    a, _ = peers
    forwarded = server.handle_datagram(
        Message(MessageTag.CONNECT).encode(), a.getsockname(), 10.0
    )
    assert forwarded == []
    message = _receive(a)
    assert message.tag is MessageTag.ASSIGN_UID
    assert message.uid == 1


def test_state_is_forwarded_with_sender_uid(server, peers):
    a, b = peers
    server.handle_datagram(Message(MessageTag.CONNECT).encode(), a.getsockname(), 10.0)
    server.handle_datagram(Message(MessageTag.CONNECT).encode(), b.getsockname(), 10.0)
    _receive(a)
    _receive(b)
    state = NetworkHeroState(Vec2(8.0, 9.0), 1, HeroPalette.RED)
    forwarded = server.handle_datagram(
        Message(MessageTag.SYNC_STATE, sender=77, state=state).encode(), b.getsockname(), 11.0
    )
    assert [client.uid for client in forwarded] == [1]
    message = _receive(a)
    assert message.tag is MessageTag.SYNC_STATE
    assert message.sender == 2
    assert message.state == state


def test_disconnect_marks_client_dead(server, peers):
    a, _ = peers
    server.handle_datagram(Message(MessageTag.CONNECT).encode(), a.getsockname(), 1.0)
    server.handle_datagram(Message(MessageTag.DISCONNECT).encode(), a.getsockname(), 2.0)
    assert len(server.clients) == 0


def test_malformed_datagram_is_not_forwarded(server, peers):
    a, b = peers
    server.handle_datagram(Message(MessageTag.CONNECT).encode(), a.getsockname(), 1.0)
    assert server.handle_datagram(b"\x09", b.getsockname(), 1.0) == []
    assert len(server.clients) == 2