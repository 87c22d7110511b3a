"""
Flask extension instances — created here, initialized in the app factory.

This pattern (separate from __init__.py) prevents circular imports
and allows extensions to be imported independently by blueprints.
"""

from flask_bcrypt import Bcrypt
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from flask_login import LoginManager
from flask_wtf.csrf import CSRFProtect

# Password hashing — bcrypt with configurable rounds (see config.py).
bcrypt = Bcrypt()

# CSRF protection — validates tokens on all POST requests.
csrf = CSRFProtect()

# Identity <-> session reference. The user loader lives in users/security.py.
login_manager = LoginManager()
# Session id rotation on login/logout is handled by the session store.
login_manager.session_protection = None

# Rate limiting — per-IP, applied to the login endpoint.
limiter = Limiter(key_func=get_remote_address)
