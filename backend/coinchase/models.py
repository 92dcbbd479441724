from dataclasses import dataclass, field, replace
from typing import Any, Dict, Optional, Tuple


@dataclass(frozen=True)
class PlayField:
    """Rectangular world bounds shared by players and the collectible."""
    min_x: int
    min_y: int
    max_x: int
    max_y: int

    def clamp(self, x: float, y: float) -> Tuple[float, float]:
        return (
            min(max(x, self.min_x), self.max_x),
            min(max(y, self.min_y), self.max_y),
        )

    @classmethod
    def from_config(cls, config) -> 'PlayField':
        return cls(
            min_x=int(config['PLAY_FIELD_MIN_X']),
            min_y=int(config['PLAY_FIELD_MIN_Y']),
            max_x=int(config['PLAY_FIELD_MAX_X']),
            max_y=int(config['PLAY_FIELD_MAX_Y']),
        )


@dataclass
class Player:
    id: str
    x: float
    y: float
    score: int = 0
    # Movement/animation fields relayed to opponents as-is (spriteState, dir, ...)
    state: Dict[str, Any] = field(default_factory=dict)

    def copy(self) -> 'Player':
        return replace(self, state=dict(self.state))

    def to_dict(self):
        data = dict(self.state)
        data.update({
            'id': self.id,
            'x': self.x,
            'y': self.y,
            'score': self.score,
        })
        return data


@dataclass(frozen=True)
class Collectible:
    id: str
    x: int
    y: int
    value: int
    sprite_variant: int = 0

    @property
    def position(self) -> Tuple[int, int]:
        return (self.x, self.y)

    def to_dict(self):
        return {
            'id': self.id,
            'x': self.x,
            'y': self.y,
            'value': self.value,
            'spriteSrcIndex': self.sprite_variant,
        }


def collectible_dict(collectible: Optional[Collectible]):
    return collectible.to_dict() if collectible else None
