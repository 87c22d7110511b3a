"""
Users blueprint — registration, login and logout.
"""

from flask import Blueprint

users_bp = Blueprint('users', __name__)

# Import routes to register them with the blueprint.
# This import must be at the bottom to avoid circular imports.
from yelpcamp.users import routes  # noqa: E402, F401
