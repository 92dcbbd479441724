"""Session domain services: player directory, collectible spawning and scoring.

These classes hold the in-memory session and know nothing about Socket.IO;
the connection registry in ``coinchase.socketio_events`` drives them and
decides who hears about the results.
"""

from .players import PlayerDirectory
from .scoring import ClaimResult, RejectReason, ScoreArbiter
from .spawner import CollectibleSpawner

__all__ = [
    'ClaimResult',
    'CollectibleSpawner',
    'PlayerDirectory',
    'RejectReason',
    'ScoreArbiter',
]
