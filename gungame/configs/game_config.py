"""
Game configuration for GunGame
Engine tunables, entity tables and agent-harness settings
"""

# Engine parameters
ENGINE_CONFIG = {
    "width": 800,
    "height": 600,
    "tick_ms": 30,            # fixed simulation period
    "player_radius": 10,
    "start_lives": 3,
    "max_shots": 5,           # shots-available cap
    "projectile_speed": 8.0,  # units per tick
    "projectile_size": 6,
    "wave_size_per_level": 5,
    "spawn_delay_ms": 1000,   # delay between a level transition and its wave
    "level_clear_bonus": 25,
}

# ==============================================================================
# ENTITY TABLES
# ==============================================================================

CIRCLE_TYPES = {
    "large": {"size": 30, "points": 1, "color": "red"},
    "medium": {"size": 20, "points": 2, "color": "orange"},
    "small": {"size": 12, "points": 5, "color": "yellow"},
}

# Category a destroyed circle splits into (small does not split)
SPLITS_INTO = {
    "large": "medium",
    "medium": "small",
}

SPECIAL_CHANCE = 0.05        # only small circles roll this
SPECIAL_DURATION_MS = 5000
SPAWN_ATTEMPTS = 50
SPAWN_CLEARANCE = 50         # extra gap between a fresh circle and the player
SPLIT_OFFSET = 15
SPLIT_JITTER = 0.5           # radians
SPLIT_SPEED = (2.0, 3.0)

WEAPONS = {
    "Pistol": {"fire_rate_ms": 1500},
    "Shotgun": {"fire_rate_ms": 1500, "burst": 5},
}

SHOTGUN_SPREAD = (-0.3, -0.15, 0.0, 0.15, 0.3)

# ==============================================================================
# POWER-UPS
# ==============================================================================

# Weights sum to 100
POWERUP_WEIGHTS = {
    "shotgun": 25,
    "points100": 25,
    "bounce": 25,
    "invincibility": 10,
    "nuke": 10,
    "extraLife": 5,
}

# Timed effects only
POWERUP_DURATIONS = {
    "shotgun": 10_000,
    "bounce": 10_000,
    "invincibility": 30_000,
}

POWERUP_MESSAGES = {
    "shotgun": "SHOTGUN!",
    "points100": "+100 POINTS",
    "bounce": "BOUNCE!",
    "invincibility": "INVINCIBLE!",
    "nuke": "NUKE! +250",
    "extraLife": "EXTRA LIFE!",
}

POWERUP_RADIUS = 15
POWERUP_LIFETIME_MS = 10_000
POINTS100_BONUS = 100
NUKE_BONUS = 250
MESSAGE_DURATION_MS = 2500

# ==============================================================================
# PLAYER
# ==============================================================================

RESPAWN_DELAY_MS = 2000
RESPAWN_IMMUNITY_MS = 5000
BLINK_START_MS = 500
BLINK_DECAY = 0.88
BLINK_FLOOR_MS = 100

LEADERBOARD_SIZE = 10

# ==============================================================================
# AGENT HARNESS
# ==============================================================================

ENV_CONFIG = {
    "max_steps": 6000,   # 3 minutes at one tick per step
    "k_circles": 8,
    "m_powerups": 2,
    "n_aim": 16,
}
