"""
Reviews blueprint — mounted under /campgrounds/<campground_id>/reviews.
"""

from flask import Blueprint

reviews_bp = Blueprint('reviews', __name__)

# Import routes to register them with the blueprint.
# This import must be at the bottom to avoid circular imports.
from yelpcamp.reviews import routes  # noqa: E402, F401
