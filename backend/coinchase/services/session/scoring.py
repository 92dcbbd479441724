import enum
import logging
import threading
from dataclasses import dataclass
from typing import Optional, Tuple

from coinchase.models import Collectible, Player
from .players import PlayerDirectory
from .spawner import CollectibleSpawner

logger = logging.getLogger(__name__)


class RejectReason(enum.Enum):
    UNKNOWN_PLAYER = 'unknown_player'
    STALE_COLLECTIBLE = 'stale_collectible'


@dataclass(frozen=True)
class ClaimResult:
    accepted: bool
    reason: Optional[RejectReason] = None
    player: Optional[Player] = None
    collectible: Optional[Collectible] = None
    winner: Optional[str] = None
    losers: Tuple[str, ...] = ()

    @classmethod
    def rejected(cls, reason: RejectReason) -> 'ClaimResult':
        return cls(accepted=False, reason=reason)


class ScoreArbiter:
    """Serializes collectible claims so each collectible scores exactly once.

    Clients detect collisions on their own and race their claims to the
    server; whichever claim names the active collectible first wins, and
    every later claim for that id is stale because the id was replaced.
    """

    def __init__(
        self,
        players: PlayerDirectory,
        spawner: CollectibleSpawner,
        win_score: int = 0,
        lock: Optional[threading.RLock] = None,
    ):
        self.players = players
        self.spawner = spawner
        self.win_score = int(win_score or 0)
        self.lock = lock or threading.RLock()

    def claim(self, player_id: str, collectible_id: str) -> ClaimResult:
        with self.lock:
            if player_id not in self.players:
                return ClaimResult.rejected(RejectReason.UNKNOWN_PLAYER)
            active = self.spawner.active
            if active is None or active.id != collectible_id:
                return ClaimResult.rejected(RejectReason.STALE_COLLECTIBLE)

            previous_score = self.players.get(player_id).score
            player = self.players.add_score(player_id, active.value)
            replacement = self.spawner.spawn(active.position)

            winner = None
            losers: Tuple[str, ...] = ()
            if self.win_score and previous_score < self.win_score <= player.score:
                winner = player_id
                losers = tuple(pid for pid in self.players.ids() if pid != player_id)
                logger.info("player %s reached %d and wins", player_id, player.score)

            return ClaimResult(
                accepted=True,
                player=player,
                collectible=replacement,
                winner=winner,
                losers=losers,
            )
