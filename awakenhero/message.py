"""Messages exchanged between game clients and the relay server, and their wire form."""

import struct
from dataclasses import dataclass
from enum import IntEnum
from typing import Optional

from .geometry import Vec2
from .textures import HeroPalette


class MessageTag(IntEnum):
    """What a message is about."""

    NONE = 0
    CONNECT = 1
    DISCONNECT = 2
    ASSIGN_UID = 3
    SYNC_STATE = 4
    ACTION = 5


class Action(IntEnum):
    """Things a hero can do that other players must see."""

    SWING = 0


@dataclass(frozen=True)
class NetworkHeroState:
    """What other players need to know to draw a hero."""

    position: Vec2
    facing: int
    palette: HeroPalette


@dataclass(frozen=True)
class MessageAction:
    """An action performed by a hero at a position."""

    action: Action = Action.SWING
    x: float = 0.0
    y: float = 0.0
    owner: int = 0


# Header: tag, sender. Payloads are fixed-size per tag.
_HEADER = struct.Struct("<BQ")
_UID = struct.Struct("<Q")
_STATE = struct.Struct("<ffBB")
_ACTION = struct.Struct("<BffQ")

_PAYLOAD_SIZE = {
    MessageTag.NONE: 0,
    MessageTag.CONNECT: 0,
    MessageTag.DISCONNECT: 0,
    MessageTag.ASSIGN_UID: _UID.size,
    MessageTag.SYNC_STATE: _STATE.size,
    MessageTag.ACTION: _ACTION.size,
}


@dataclass(frozen=True)
class Message:
    """One datagram: a tag, the uid of its sender and the payload the tag calls for."""

    tag: MessageTag
    sender: int = 0
    uid: int = 0
    state: Optional[NetworkHeroState] = None
    action: Optional[MessageAction] = None

    def _payload(self):
        tag = MessageTag(self.tag)
        if tag is MessageTag.ASSIGN_UID:
            return _UID.pack(self.uid)
        if tag is MessageTag.SYNC_STATE:
            if self.state is None:
                raise ValueError("a SYNC_STATE message needs a state")
            state = self.state
            return _STATE.pack(
                state.position.x, state.position.y, int(state.facing), int(state.palette)
            )
        if tag is MessageTag.ACTION:
            if self.action is None:
                raise ValueError("an ACTION message needs an action")
            action = self.action
            return _ACTION.pack(int(action.action), action.x, action.y, action.owner)
        return b""

    def encode(self):
        """Return the message as bytes ready to send."""
        try:
            return _HEADER.pack(int(self.tag), self.sender) + self._payload()
        except struct.error as exc:
            raise ValueError(f"cannot encode message: {exc}") from None

    @classmethod
    def decode(cls, data):
        """Parse bytes produced by ``encode``; raise ValueError if they are malformed."""
        data = bytes(data)
        if len(data) < _HEADER.size:
            raise ValueError(f"message too short: {len(data)} bytes")
        tag_value, sender = _HEADER.unpack_from(data)
        tag = MessageTag(tag_value)
        body = data[_HEADER.size:]
        expected = _PAYLOAD_SIZE[tag]
        if len(body) != expected:
            raise ValueError(
                f"{tag.name} payload must be {expected} bytes, got {len(body)}"
            )
        if tag is MessageTag.ASSIGN_UID:
            (uid,) = _UID.unpack(body)
            return cls(tag, sender, uid=uid)
        if tag is MessageTag.SYNC_STATE:
            x, y, facing, palette = _STATE.unpack(body)
            state = NetworkHeroState(Vec2(x, y), facing, HeroPalette(palette))
            return cls(tag, sender, state=state)
        if tag is MessageTag.ACTION:
            action, x, y, owner = _ACTION.unpack(body)
            return cls(tag, sender, action=MessageAction(Action(action), x, y, owner))
        return cls(tag, sender)