import os


def _parse_tiers(raw):
    """Parse ``"1:0.60,2:0.25,3:0.15"`` into ``((1, 0.6), (2, 0.25), (3, 0.15))``."""
    tiers = []
    for chunk in raw.split(','):
        chunk = chunk.strip()
        if not chunk:
            continue
        value, _, weight = chunk.partition(':')
        tiers.append((int(value), float(weight or 1)))
    return tuple(tiers)


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
    CORS_ALLOWED_ORIGINS = [
        o.strip() for o in os.environ.get(
            'CORS_ALLOWED_ORIGINS',
            'http://localhost:3000,http://127.0.0.1:3000,http://localhost:5173,http://127.0.0.1:5173',
        ).split(',') if o.strip()
    ]
    # Play field extents (pixels); player positions are clamped to these
    PLAY_FIELD_MIN_X = int(os.environ.get('PLAY_FIELD_MIN_X', '10'))
    PLAY_FIELD_MIN_Y = int(os.environ.get('PLAY_FIELD_MIN_Y', '50'))
    PLAY_FIELD_MAX_X = int(os.environ.get('PLAY_FIELD_MAX_X', '630'))
    PLAY_FIELD_MAX_Y = int(os.environ.get('PLAY_FIELD_MAX_Y', '470'))
    # Collectible sprite extent; spawns are inset by half of it
    COLLECTIBLE_SIZE = int(os.environ.get('COLLECTIBLE_SIZE', '15'))
    COLLECTIBLE_SPRITE_VARIANTS = int(os.environ.get('COLLECTIBLE_SPRITE_VARIANTS', '3'))
    # Reward tiers as value:weight pairs
    COLLECTIBLE_VALUE_TIERS = _parse_tiers(os.environ.get('COLLECTIBLE_VALUE_TIERS', '1:0.60,2:0.25,3:0.15'))
    # Score that ends the game for everyone. 0 disables win detection.
    WIN_SCORE = int(os.environ.get('WIN_SCORE', '100'))
    # Movement/animation keys kept from join/stateChange payloads and relayed to opponents
    PLAYER_STATE_FIELDS = tuple(
        f.strip() for f in os.environ.get('PLAYER_STATE_FIELDS', 'spriteState,dir').split(',') if f.strip()
    )
