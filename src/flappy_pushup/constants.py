"""
constants.py: Centralized tuning for the game and ranking settings.
"""

# -------- Game World Config --------
SCREEN_WIDTH = 960
SCREEN_HEIGHT = 720
RENDER_FPS = 60
AVATAR_X_RATIO = 0.2            # Avatar stays at 20% from the left edge
AVATAR_RADIUS = 25
AVATAR_SMOOTHING = 0.15         # Fraction of the distance to target covered per tick
GROUND_HEIGHT = 50
CEILING_HEIGHT = 0

# -------- Pipe Config --------
PIPE_WIDTH = 80
BASE_PIPE_GAP = 180
MIN_PIPE_GAP = 120
MAX_GAP_SCREEN_RATIO = 0.25     # Base gap never exceeds a quarter of the height
GAP_SHRINK_PER_POINT = 2
MIN_PIPE_HEIGHT = 50            # Minimum stub above and below the gap
PIPE_SPAWN_INTERVAL_MS = 2000

# -------- Difficulty Config (pixels / tick) --------
BASE_PIPE_SPEED = 3.0
SPEED_GAIN_PER_POINT = 0.1

# -------- Movement Intent Config --------
MOVEMENT_THRESHOLD = 0.05
MOVEMENT_COOLDOWN_TICKS = 30

# -------- Shoulder Tracking Config --------
SHOULDER_SMOOTHING = 0.3
MIN_CALIBRATION_RANGE = 0.05

# -------- Ranking Config --------
MAX_LEADERBOARD = 100
MAX_TRACKED_SCORE = 200         # Histogram domain is [0, MAX_TRACKED_SCORE]
MAX_NAME_LENGTH = 20
FIRST_PLAYER_PERCENTILE = 50
RANKING_CACHE_TTL_SEC = 30.0
