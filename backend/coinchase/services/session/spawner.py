import logging
import random
import uuid
from typing import Optional, Sequence, Tuple

from coinchase.models import Collectible, PlayField

logger = logging.getLogger(__name__)

DEFAULT_VALUE_TIERS = ((1, 0.60), (2, 0.25), (3, 0.15))


class CollectibleSpawner:
    """Owns the single active collectible and the policy for replacing it.

    Positions are integer sprite centres drawn uniformly from the play field
    inset by half the sprite size. Values come from weighted tiers.
    """

    def __init__(
        self,
        play_field: PlayField,
        sprite_size: int = 15,
        sprite_variants: int = 1,
        value_tiers: Sequence[Tuple[int, float]] = DEFAULT_VALUE_TIERS,
        rng: Optional[random.Random] = None,
    ):
        half = sprite_size // 2
        self.min_x = play_field.min_x + half
        self.max_x = play_field.max_x - half
        self.min_y = play_field.min_y + half
        self.max_y = play_field.max_y - half
        if self.min_x > self.max_x or self.min_y > self.max_y:
            raise ValueError("play field is smaller than the collectible sprite")
        if self.min_x == self.max_x and self.min_y == self.max_y:
            raise ValueError("play field leaves room for only one collectible position")
        if not value_tiers or any(v <= 0 or w <= 0 for v, w in value_tiers):
            raise ValueError("value tiers need positive values and weights")

        self.sprite_variants = max(1, int(sprite_variants))
        self._values = [v for v, _ in value_tiers]
        self._weights = [w for _, w in value_tiers]
        self._rng = rng or random.Random()
        self._active: Optional[Collectible] = None

    @property
    def active(self) -> Optional[Collectible]:
        return self._active

    def ensure_active(self) -> Collectible:
        if self._active is None:
            return self.spawn()
        return self._active

    def spawn(self, previous_position: Optional[Tuple[int, int]] = None) -> Collectible:
        previous = self._active
        if previous_position is None and previous is not None:
            previous_position = previous.position

        position = self._random_position()
        while position == previous_position:
            position = self._random_position()

        if previous is None:
            variant = self._rng.randrange(self.sprite_variants)
        else:
            variant = (previous.sprite_variant + 1) % self.sprite_variants

        collectible = Collectible(
            id=uuid.uuid4().hex,
            x=position[0],
            y=position[1],
            value=self._rng.choices(self._values, weights=self._weights, k=1)[0],
            sprite_variant=variant,
        )
        self._active = collectible
        logger.debug("spawned collectible %s at %s worth %d", collectible.id, position, collectible.value)
        return collectible

    def _random_position(self) -> Tuple[int, int]:
        return (
            self._rng.randint(self.min_x, self.max_x),
            self._rng.randint(self.min_y, self.max_y),
        )
