import os


def _env_flag(name):
    value = os.environ.get(name)
    if value is None or value.strip() == '':
        return None
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


class Config:
    DEBUG = bool(_env_flag('FLASK_DEBUG'))
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    # Admin credential: a bcrypt hash wins over the plain password
    ADMIN_PASSWORD_HASH = os.environ.get('ADMIN_PASSWORD_HASH')
    ADMIN_PASSWORD = os.environ.get('ADMIN_PASSWORD', '12345')
    # Defaults applied when start_game omits a field
    DEFAULT_MAX_NUMBERS = int(os.environ.get('DEFAULT_MAX_NUMBERS', '100'))
    DEFAULT_WINNERS_COUNT = int(os.environ.get('DEFAULT_WINNERS_COUNT', '3'))
    DEFAULT_PRICE_PER_CHIP = float(os.environ.get('DEFAULT_PRICE_PER_CHIP', '10'))
    DEFAULT_DRAW_INTERVAL_SEC = float(os.environ.get('DEFAULT_DRAW_INTERVAL_SEC', '4'))
    DEFAULT_VOICE = os.environ.get('DEFAULT_VOICE', 'female')
    # Upper bounds accepted from the admin panel
    MAX_NUMBERS_LIMIT = int(os.environ.get('MAX_NUMBERS_LIMIT', '1000'))
    MIN_DRAW_INTERVAL_SEC = float(os.environ.get('MIN_DRAW_INTERVAL_SEC', '0.5'))
    # None follows DEBUG / TESTING
    STRICT_INVARIANTS = _env_flag('STRICT_INVARIANTS')
    CORS_ORIGINS = [
        o.strip() for o in os.environ.get(
            'CORS_ORIGINS',
            'http://localhost:5173,http://127.0.0.1:5173,http://localhost:5174,http://127.0.0.1:5174',
        ).split(',') if o.strip()
    ]
