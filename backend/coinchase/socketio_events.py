import math
from typing import Any, Dict, List, Optional

from flask import current_app, request

from coinchase import socketio
from coinchase.broadcast import BroadcastBus, Outbound, everyone, others, reply
from coinchase.models import PlayField, collectible_dict
from coinchase.services.session import (
    CollectibleSpawner,
    PlayerDirectory,
    ScoreArbiter,
)

NAMESPACE = '/ws'


class MalformedPayload(ValueError):
    """Inbound event payload is missing or has unusable required fields."""


def _get_sid() -> str:
    # type: ignore: request.sid exists in Socket.IO context
    return request.sid  # type: ignore


def _require_dict(data) -> Dict[str, Any]:
    if not isinstance(data, dict):
        raise MalformedPayload('payload must be an object')
    return data


def _coordinate(data: Dict[str, Any], key: str, required: bool = True) -> Optional[float]:
    value = data.get(key)
    if value is None and not required:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
        raise MalformedPayload(f'{key} must be a number')
    return value


def parse_join(data) -> Dict[str, Any]:
    data = _require_dict(data)
    state = dict(data)
    state['x'] = _coordinate(data, 'x')
    state['y'] = _coordinate(data, 'y')
    return state


def parse_state_change(data) -> Dict[str, Any]:
    data = _require_dict(data)
    state = dict(data)
    for key in ('x', 'y'):
        value = _coordinate(data, key, required=False)
        if value is None:
            state.pop(key, None)
        else:
            state[key] = value
    return state


def parse_collide(data, sid: str) -> str:
    data = _require_dict(data)
    collectible_id = data.get('collectibleId')
    if not isinstance(collectible_id, str) or not collectible_id:
        raise MalformedPayload('collectibleId is required')
    player_id = data.get('playerId')
    if player_id is not None and player_id != sid:
        raise MalformedPayload('playerId does not match this connection')
    return collectible_id


class ConnectionRegistry:
    """Maps inbound Socket.IO events onto the session and picks audiences.

    One instance per app. All session mutation happens under ``lock``;
    outbound messages are collected and delivered after it is released.
    """

    def __init__(self, players: PlayerDirectory, spawner: CollectibleSpawner,
                 arbiter: ScoreArbiter, bus: BroadcastBus):
        self.players = players
        self.spawner = spawner
        self.arbiter = arbiter
        self.bus = bus
        self.lock = arbiter.lock

    @classmethod
    def from_config(cls, config, bus: BroadcastBus, rng=None) -> 'ConnectionRegistry':
        play_field = PlayField.from_config(config)
        players = PlayerDirectory(play_field, state_fields=config.get('PLAYER_STATE_FIELDS', ('spriteState', 'dir')))
        spawner = CollectibleSpawner(
            play_field,
            sprite_size=int(config.get('COLLECTIBLE_SIZE', 15)),
            sprite_variants=int(config.get('COLLECTIBLE_SPRITE_VARIANTS', 1)),
            value_tiers=config['COLLECTIBLE_VALUE_TIERS'],
            rng=rng,
        )
        arbiter = ScoreArbiter(players, spawner, win_score=config.get('WIN_SCORE', 0))
        return cls(players, spawner, arbiter, bus)

    def session_state(self) -> Dict[str, Any]:
        with self.lock:
            return {
                'players': [p.to_dict() for p in self.players.snapshot()],
                'collectible': collectible_dict(self.spawner.active),
                'win_score': self.arbiter.win_score,
            }

    # ---- event handlers ----

    def handle_connect(self, auth=None):
        sid = _get_sid()
        self.bus.send(reply(sid, 'connected', {'id': sid, 'message': f'Connected to {NAMESPACE}'}))

    def handle_join(self, data=None):
        sid = _get_sid()
        try:
            state = parse_join(data)
        except MalformedPayload as exc:
            return self._drop('join', sid, exc)

        out: List[Outbound] = []
        with self.lock:
            is_new = sid not in self.players
            current = self.players.snapshot(exclude=sid)
            player = self.players.join(sid, state)
            collectible = self.spawner.ensure_active()
            out.append(reply(sid, 'currentPlayers', [p.to_dict() for p in current]))
            out.append(reply(sid, 'collectible', collectible.to_dict()))
            if is_new:
                out.append(others(sid, 'newPlayer', player.to_dict()))
        if is_new:
            current_app.logger.info(f"[join] player={sid} players={len(current) + 1}")
        else:
            current_app.logger.info(f"[join-dup] player={sid} resent snapshot")
        self.bus.deliver(out)

    def handle_state_change(self, data=None):
        sid = _get_sid()
        try:
            state = parse_state_change(data)
        except MalformedPayload as exc:
            return self._drop('stateChange', sid, exc)

        with self.lock:
            player = self.players.update_state(sid, state)
        if player is None:
            current_app.logger.debug(f"[state-skip] player={sid} not joined")
            return
        self.bus.send(others(sid, 'opponentStateChange', player.to_dict()))

    def handle_collide(self, data=None):
        sid = _get_sid()
        try:
            collectible_id = parse_collide(data, sid)
        except MalformedPayload as exc:
            return self._drop('collide', sid, exc)

        result = self.arbiter.claim(sid, collectible_id)
        if not result.accepted:
            current_app.logger.debug(
                f"[claim-reject] player={sid} collectible={collectible_id} reason={result.reason.value}"
            )
            return

        player = result.player
        out: List[Outbound] = [
            reply(sid, 'scored', {'score': player.score}),
            others(sid, 'opponentStateChange', player.to_dict()),
            everyone('collectible', result.collectible.to_dict()),
        ]
        if result.winner:
            out.append(reply(result.winner, 'endGame', {'result': 'win'}))
            out.extend(reply(loser, 'endGame', {'result': 'lose'}) for loser in result.losers)
        current_app.logger.info(
            f"[claim] player={sid} collectible={collectible_id} score={player.score} next={result.collectible.id}"
        )
        if result.winner:
            current_app.logger.info(f"[win] player={result.winner} losers={len(result.losers)}")
        self.bus.deliver(out)

    def handle_disconnect(self, reason=None):
        sid = _get_sid()
        with self.lock:
            player = self.players.leave(sid)
        if player is None:
            return
        current_app.logger.info(f"[leave] player={sid} score={player.score}")
        self.bus.send(others(sid, 'playerLeave', {'id': player.id}))

    def _drop(self, event: str, sid: str, exc: MalformedPayload) -> None:
        current_app.logger.warning(f"[malformed] event={event} player={sid} error={exc}")
        self.bus.send(reply(sid, 'error', {'event': event, 'message': str(exc)}))


def register_socketio_handlers(registry: ConnectionRegistry, namespace: str = NAMESPACE) -> None:
    """Bind the registry's handlers, including the legacy join/state event names.

    Legacy collision messages carried a whole player object and no collectible
    id, so there is nothing to arbitrate on; only ``collide`` is accepted.
    """
    socketio.on_event('connect', registry.handle_connect, namespace=namespace)
    socketio.on_event('disconnect', registry.handle_disconnect, namespace=namespace)
    for name in ('join', 'joinGame'):
        socketio.on_event(name, registry.handle_join, namespace=namespace)
    for name in ('stateChange', 'move', 'playerStateChange'):
        socketio.on_event(name, registry.handle_state_change, namespace=namespace)
    socketio.on_event('collide', registry.handle_collide, namespace=namespace)
