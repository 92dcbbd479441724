import logging
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple

from coinchase.models import PlayField, Player

logger = logging.getLogger(__name__)

# Movement/animation fields relayed to opponents; anything else a client sends is dropped
DEFAULT_STATE_FIELDS = ('spriteState', 'dir')


class PlayerDirectory:
    """Connection id -> Player mapping for the lifetime of one server process.

    Not thread-safe on its own; callers serialize access through the
    session lock held by the connection registry.
    """

    def __init__(self, play_field: PlayField, state_fields: Iterable[str] = DEFAULT_STATE_FIELDS):
        self.play_field = play_field
        self.state_fields = frozenset(state_fields) - {'id', 'score', 'x', 'y'}
        self._players: Dict[str, Player] = {}

    def __contains__(self, connection_id: str) -> bool:
        return connection_id in self._players

    def __len__(self) -> int:
        return len(self._players)

    def get(self, connection_id: str) -> Optional[Player]:
        player = self._players.get(connection_id)
        return player.copy() if player else None

    def ids(self) -> Tuple[str, ...]:
        return tuple(self._players)

    def join(self, connection_id: str, initial_state: Mapping[str, Any]) -> Player:
        existing = self._players.get(connection_id)
        if existing is not None:
            logger.info("duplicate join for %s ignored", connection_id)
            return existing.copy()
        x, y = self.play_field.clamp(initial_state['x'], initial_state['y'])
        player = Player(
            id=connection_id,
            x=x,
            y=y,
            state=self._movement_fields(initial_state),
        )
        self._players[connection_id] = player
        return player.copy()

    def update_state(self, connection_id: str, partial_state: Mapping[str, Any]) -> Optional[Player]:
        player = self._players.get(connection_id)
        if player is None:
            return None
        if 'x' in partial_state or 'y' in partial_state:
            player.x, player.y = self.play_field.clamp(
                partial_state.get('x', player.x),
                partial_state.get('y', player.y),
            )
        player.state.update(self._movement_fields(partial_state))
        return player.copy()

    def add_score(self, connection_id: str, amount: int) -> Optional[Player]:
        if amount < 0:
            raise ValueError(f"score increments must be non-negative, got {amount}")
        player = self._players.get(connection_id)
        if player is None:
            return None
        player.score += amount
        return player.copy()

    def leave(self, connection_id: str) -> Optional[Player]:
        player = self._players.pop(connection_id, None)
        return player.copy() if player else None

    def snapshot(self, exclude: Optional[str] = None) -> Tuple[Player, ...]:
        return tuple(p.copy() for pid, p in self._players.items() if pid != exclude)

    def _movement_fields(self, state: Mapping[str, Any]) -> Dict[str, Any]:
        return {k: v for k, v in state.items() if k in self.state_fields}
