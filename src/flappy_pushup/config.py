import os

from .constants import RANKING_CACHE_TTL_SEC, SCREEN_HEIGHT, SCREEN_WIDTH


class Config:
    DATABASE_PATH = os.environ.get('DATABASE_PATH') or 'flappy_pushup.db'
    HOST = os.environ.get('HOST', '127.0.0.1')
    PORT = int(os.environ.get('PORT', '8787'))
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
    # Comma separated list; '*' allows any origin
    CORS_ORIGINS = os.environ.get('CORS_ORIGINS', '*')


class ClientConfig:
    RANKING_API_URL = os.environ.get('RANKING_API_URL') or 'http://127.0.0.1:8787'
    RANKING_TIMEOUT_SEC = float(os.environ.get('RANKING_TIMEOUT_SEC', '5'))
    RANKING_CACHE_TTL_SEC = float(os.environ.get('RANKING_CACHE_TTL_SEC', str(RANKING_CACHE_TTL_SEC)))
    PERSONAL_BEST_PATH = os.environ.get('PERSONAL_BEST_PATH') or os.path.join(
        os.path.expanduser('~'), '.flappy_pushup.json')
    WINDOW_WIDTH = int(os.environ.get('WINDOW_WIDTH', str(SCREEN_WIDTH)))
    WINDOW_HEIGHT = int(os.environ.get('WINDOW_HEIGHT', str(SCREEN_HEIGHT)))
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
