import os


def _flag(name, default):
    return os.environ.get(name, default).lower() in ('1', 'true', 'yes')


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    # Games expire this long after their last move (seconds)
    EXPIRY_WINDOW_SEC = int(os.environ.get('EXPIRY_WINDOW_SEC', '600'))
    # How often the sweeper evicts expired games (seconds)
    CLEANUP_INTERVAL_SEC = int(os.environ.get('CLEANUP_INTERVAL_SEC', '60'))
    SWEEPER_ENABLED = _flag('SWEEPER_ENABLED', '1')
    GAME_ID_LENGTH = int(os.environ.get('GAME_ID_LENGTH', '8'))
    # One of: token, basic
    AUTH_SCHEME = os.environ.get('AUTH_SCHEME', 'token')
    # Role given to requests without credentials, and what that role may do
    DEFAULT_ROLE = os.environ.get('DEFAULT_ROLE', 'guest')
    GUEST_ACTIONS = os.environ.get('GUEST_ACTIONS', '')
    # Legacy shared tokens; unset means disabled
    CLIENT_AUTH = os.environ.get('CLIENT_AUTH')
    ADMIN_AUTH = os.environ.get('ADMIN_AUTH')
    # Optional JSON file: {"users": {name: {password_hash, role}}, "tokens": {token: role}}
    CREDENTIALS_FILE = os.environ.get('CREDENTIALS_FILE')
    MAX_CONTENT_LENGTH = int(os.environ.get('MAX_CONTENT_LENGTH', str(64 * 1024)))
    ALLOWED_ORIGINS = os.environ.get('ALLOWED_ORIGINS', '*').split(',')
    HOST = os.environ.get('HOST', '0.0.0.0')
    PORT = int(os.environ.get('PORT', '8000'))
