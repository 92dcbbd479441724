"""Outbound fan-out for session events.

Handlers build a list of ``Outbound`` messages while holding the session
lock and hand them to ``BroadcastBus.deliver`` once the lock is released,
so no emit ever happens mid-mutation.
"""

import enum
from dataclasses import dataclass
from typing import Any, Iterable, Optional


class Audience(enum.Enum):
    REPLY = 'reply'    # a single connection
    OTHERS = 'others'  # everyone except the originating connection
    ALL = 'all'


@dataclass(frozen=True)
class Outbound:
    audience: Audience
    event: str
    payload: Any = None
    sid: Optional[str] = None


def reply(sid: str, event: str, payload: Any = None) -> Outbound:
    return Outbound(Audience.REPLY, event, payload, sid)


def others(sid: str, event: str, payload: Any = None) -> Outbound:
    return Outbound(Audience.OTHERS, event, payload, sid)


def everyone(event: str, payload: Any = None) -> Outbound:
    return Outbound(Audience.ALL, event, payload)


class BroadcastBus:
    """Best-effort delivery over a Flask-SocketIO server; no acks or retries."""

    def __init__(self, socketio, namespace: str = '/ws'):
        self.socketio = socketio
        self.namespace = namespace

    def send(self, message: Outbound) -> None:
        if message.audience is Audience.REPLY:
            self.socketio.emit(message.event, message.payload, to=message.sid, namespace=self.namespace)
        elif message.audience is Audience.OTHERS:
            self.socketio.emit(message.event, message.payload, skip_sid=message.sid, namespace=self.namespace)
        else:
            self.socketio.emit(message.event, message.payload, namespace=self.namespace)

    def deliver(self, messages: Iterable[Outbound]) -> None:
        for message in messages:
            self.send(message)
