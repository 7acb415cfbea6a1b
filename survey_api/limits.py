"""Per-IP rate limiting shared by all blueprints."""
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address

# Defaults and storage come from RATELIMIT_* in the app config
limiter = Limiter(key_func=get_remote_address)
