"""The relay server: hands out player ids and forwards each player's messages to the others."""

import logging
import socket
import time
from dataclasses import dataclass

from .message import Message, MessageTag

_log = logging.getLogger(__name__)

PORT = 3000
MAXCLIENT = 32
TIMEOUT = 10
_DATAGRAM_SIZE = 1024


@dataclass
class ServerClient:
    """A player known to the server, identified by the address it sends from."""

    address: tuple
    uid: int
    last_active: float
    alive: bool = True


class ClientTable:
    """A fixed number of client slots; slots of departed clients are reused."""

    def __init__(self):
        self._slots = []
        self.last_uid = 0

    def __len__(self):
        return sum(1 for client in self._slots if client.alive)

    def __iter__(self):
        """Yield the clients that are still alive."""
        return (client for client in self._slots if client.alive)

    def _trim(self):
        while self._slots and not self._slots[-1].alive:
            self._slots.pop()

    def find_or_insert(self, address, now):
        """Return (client, created) for ``address``, registering it if it is new.

        Raises RuntimeError when every slot is taken.
        """
        address = tuple(address)
        for client in self._slots:
            if client.alive and client.address == address:
                client.last_active = now
                return client, False
        self._trim()
        free = next((i for i, c in enumerate(self._slots) if not c.alive), None)
        if free is None and len(self._slots) >= MAXCLIENT:
            raise RuntimeError(f"server is full ({MAXCLIENT} clients)")
        self.last_uid += 1
        client = ServerClient(address, self.last_uid, now)
        if free is None:
            self._slots.append(client)
        else:
            self._slots[free] = client
        return client, True

    def recipients(self, sender, now):
        """Return the live clients other than ``sender``; silent clients are dropped."""
        result = []
        for client in self._slots:
            if client.uid == sender.uid or not client.alive:
                continue
            if client.last_active + TIMEOUT < now:
                client.alive = False
                continue
            result.append(client)
        return result


class Server:
    """A UDP relay between game clients."""

    def __init__(self, host="0.0.0.0", port=PORT):
        self.clients = ClientTable()
        self._socket = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        try:
            self._socket.bind((host, port))
        except OSError:
            self._socket.close()
            raise
        self.address = self._socket.getsockname()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    def _send(self, message, address):
        try:
            self._socket.sendto(message.encode(), address)
        except OSError as exc:
            _log.debug("send to %s failed: %s", address, exc)

    def handle_datagram(self, data, address, now):
        """Process one datagram; return the clients it was forwarded to."""
        client, created = self.clients.find_or_insert(address, now)
        if created:
            _log.info("Sending uid: %d", client.uid)
            self._send(Message(MessageTag.ASSIGN_UID, uid=client.uid), client.address)
        try:
            message = Message.decode(data)
        except ValueError as exc:
            _log.info("Dropping malformed message from %s: %s", address, exc)
            return []
        if message.tag is MessageTag.CONNECT:
            return []
        if message.tag is MessageTag.DISCONNECT:
            client.alive = False
            return []
        forwarded = Message(
            message.tag, client.uid, message.uid, message.state, message.action
        )
        recipients = self.clients.recipients(client, now)
        for recipient in recipients:
            self._send(forwarded, recipient.address)
        return recipients

    def serve_forever(self):
        """Relay datagrams until the socket is closed or the process is interrupted."""
        while True:
            try:
                data, address = self._socket.recvfrom(_DATAGRAM_SIZE)
            except OSError:
                return
            try:
                self.handle_datagram(data, address, time.time())
            except RuntimeError as exc:
                _log.warning("%s", exc)

    def close(self):
        """Close the server socket."""
        self._socket.close()


def server_main():
    """Run the relay server on the default port until interrupted."""
    logging.basicConfig(level=logging.INFO, format="[%(name)s] %(message)s")
    print("Starting server...")
    with Server() as server:
        print("Server ready.")
        try:
            server.serve_forever()
        except KeyboardInterrupt:
            print("\nCaught interrupt, closing server socket...")
    return 0