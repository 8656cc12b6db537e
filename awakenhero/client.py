"""The game's connection to the relay server, and the remote heroes it learns about."""

import logging
import socket
from dataclasses import replace
from enum import IntEnum

from .geometry import Vec2
from .hero import Direction
from .message import Message, MessageTag, NetworkHeroState
from .network_hero import NETWORK_SYNC_DELAY, NetworkHero, husk_state
from .textures import HeroPalette

_log = logging.getLogger(__name__)

PORT = 3000
MAX_MESSAGES = 20
MAX_HERO_HUSKS = 4
_DATAGRAM_SIZE = 1024

_UNSEEN_STATE = NetworkHeroState(Vec2(), Direction.DOWN, HeroPalette.GREEN)


class ClientStatus(IntEnum):
    """How far the connection to the server has come."""

    DISCONNECTED = 0
    CONNECTED = 1
    READY = 2


class Client:
    """Sends the local hero's state to the server and mirrors the other players' heroes."""

    def __init__(self, hero, registry, address=("127.0.0.1", PORT)):
        self.hero = hero
        self.address = tuple(address)
        self.uid = 0
        self.last_sync = 0.0
        self.status = ClientStatus.DISCONNECTED
        self.network_heroes = []
        self._registry = registry
        self._socket = None
        self._now = 0.0

    def __enter__(self):
        return self.connect()

    def __exit__(self, *exc_info):
        self.close()

    def _send(self, message):
        if self._socket is None:
            return
        data = replace(message, sender=self.uid).encode()
        try:
            self._socket.sendto(data, self.address)
        except OSError as exc:
            _log.debug("send failed: %s", exc)

    def connect(self):
        """Open a non-blocking UDP socket and announce this client to the server."""
        self._socket = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        self._socket.setblocking(False)
        self.status = ClientStatus.CONNECTED
        self._send(Message(MessageTag.CONNECT))
        _log.info("Client connected...")
        return self

    def close(self):
        """Tell the server goodbye and close the socket."""
        if self._socket is not None:
            self._send(Message(MessageTag.DISCONNECT))
            self._socket.close()
            self._socket = None
        self.status = ClientStatus.DISCONNECTED

    def find_network_hero(self, owner):
        """Return the remote hero owned by ``owner``, or None if it has not been seen."""
        return next((hero for hero in self.network_heroes if hero.owner == owner), None)

    def _network_hero_for(self, owner, state):
        hero = self.find_network_hero(owner)
        if hero is not None:
            return hero
        if len(self.network_heroes) >= MAX_HERO_HUSKS:
            raise RuntimeError(f"cannot track more than {MAX_HERO_HUSKS} remote heroes")
        hero = NetworkHero(self._registry, owner, state)
        self.network_heroes.append(hero)
        return hero

    def handle_message(self, message):
        """React to one message from the server."""
        tag = message.tag
        if tag is MessageTag.ASSIGN_UID:
            _log.info("Assigning UID: %d", message.uid)
            self.uid = message.uid
            self.status = ClientStatus.READY
            self.hero.husk.animation.palette = HeroPalette((message.uid - 1) % len(HeroPalette))
        elif tag is MessageTag.SYNC_STATE:
            hero = self._network_hero_for(message.sender, message.state)
            hero.handle_sync(message.state, self._now)
        elif tag is MessageTag.ACTION:
            hero = self._network_hero_for(message.sender, _UNSEEN_STATE)
            hero.handle_action(message.action.x, message.action.y)
        elif tag in (MessageTag.CONNECT, MessageTag.DISCONNECT):
            _log.info("Unexpected message type: %s", tag.name)
        else:
            _log.info("Unknown message type: %d", int(tag))

    def send_action(self, action):
        """Tell the other players about an action of the local hero."""
        self._send(Message(MessageTag.ACTION, action=replace(action, owner=self.uid)))

    def _receive(self):
        for _ in range(MAX_MESSAGES):
            try:
                data, _ = self._socket.recvfrom(_DATAGRAM_SIZE)
            except OSError:
                return
            if not data:
                return
            try:
                yield Message.decode(data)
            except ValueError as exc:
                _log.info("Dropping malformed message: %s", exc)

    def update(self, now):
        """Handle waiting messages and, when due, send the hero's state."""
        self._now = now
        if self.status is ClientStatus.DISCONNECTED or self._socket is None:
            return
        for message in self._receive():
            self.handle_message(message)
        if self.status is not ClientStatus.READY:
            return
        if self.last_sync + NETWORK_SYNC_DELAY < now:
            self.last_sync = now
            self._send(Message(MessageTag.SYNC_STATE, state=husk_state(self.hero.husk)))