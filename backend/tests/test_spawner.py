import random
from collections import Counter

import pytest

from coinchase.models import PlayField
from coinchase.services.session import CollectibleSpawner


def _spawner(play_field, **kwargs):
    kwargs.setdefault('rng', random.Random(1234))
    return CollectibleSpawner(play_field, **kwargs)


def test_spawn_stays_inside_inset_play_field(play_field):
    spawner = _spawner(play_field, sprite_size=16)
    for _ in range(500):
        c = spawner.spawn()
        assert play_field.min_x + 8 <= c.x <= play_field.max_x - 8
        assert play_field.min_y + 8 <= c.y <= play_field.max_y - 8
        assert c.value in (1, 2, 3)


def test_respawn_never_repeats_previous_position():
    # A 2x1 field forces the retry loop to matter on every spawn
    spawner = _spawner(PlayField(0, 0, 1, 0), sprite_size=0)
    previous = spawner.spawn()
    for _ in range(50):
        nxt = spawner.spawn()
        assert nxt.position != previous.position
        previous = nxt


def test_explicit_previous_position_is_avoided():
    spawner = _spawner(PlayField(0, 0, 1, 0), sprite_size=0)
    for _ in range(20):
        assert spawner.spawn((0, 0)).position == (1, 0)


def test_every_spawn_gets_a_fresh_id_and_replaces_active(play_field):
    spawner = _spawner(play_field)
    ids = set()
    for _ in range(200):
        c = spawner.spawn()
        assert spawner.active is c
        ids.add(c.id)
    assert len(ids) == 200


def test_sprite_variant_cycles(play_field):
    spawner = _spawner(play_field, sprite_variants=3)
    first = spawner.spawn().sprite_variant
    variants = [spawner.spawn().sprite_variant for _ in range(6)]
    assert variants == [(first + i) % 3 for i in range(1, 7)]


def test_value_follows_tier_weights(play_field):
    spawner = _spawner(play_field, value_tiers=((1, 0.60), (2, 0.25), (3, 0.15)))
    counts = Counter(spawner.spawn().value for _ in range(4000))
    assert set(counts) == {1, 2, 3}
    assert counts[1] > counts[2] > counts[3]


def test_ensure_active_spawns_once(play_field):
    spawner = _spawner(play_field)
    assert spawner.active is None
    first = spawner.ensure_active()
    assert spawner.ensure_active() is first


def test_collectible_is_immutable(play_field):
    c = _spawner(play_field).spawn()
    with pytest.raises(AttributeError):
        c.value = 100


@pytest.mark.parametrize('field, size', [
    (PlayField(0, 0, 0, 0), 0),
    (PlayField(0, 0, 10, 10), 30),
])
def test_degenerate_play_field_is_rejected(field, size):
    with pytest.raises(ValueError):
        CollectibleSpawner(field, sprite_size=size)


def test_invalid_value_tiers_are_rejected(play_field):
    with pytest.raises(ValueError):
        CollectibleSpawner(play_field, value_tiers=((0, 1.0),))
    with pytest.raises(ValueError):
        CollectibleSpawner(play_field, value_tiers=())
