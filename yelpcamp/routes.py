"""
Route mounting: the home page and the feature blueprints.
"""

from flask import Flask, render_template


def register_routes(app: Flask) -> None:
    from yelpcamp.campgrounds import campgrounds_bp
    from yelpcamp.reviews import reviews_bp
    from yelpcamp.users import users_bp

    app.register_blueprint(users_bp)
    app.register_blueprint(campgrounds_bp, url_prefix='/campgrounds')
    app.register_blueprint(reviews_bp, url_prefix='/campgrounds/<campground_id>/reviews')

    @app.route('/')
    def home():
        return render_template('home.html')
