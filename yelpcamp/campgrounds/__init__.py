"""
Campgrounds blueprint — listing, detail and author-only editing.
"""

from flask import Blueprint

campgrounds_bp = Blueprint('campgrounds', __name__)

# Import routes to register them with the blueprint.
# This import must be at the bottom to avoid circular imports.
from yelpcamp.campgrounds import routes  # noqa: E402, F401
