"""
Application entry point.

Usage:
    python run.py

Reads DB_URL, SECRET and PORT from the environment (or a .env file) and
starts the Flask development server.
"""

from yelpcamp import create_app
from yelpcamp.config import Settings

settings = Settings.from_env()
app = create_app(settings=settings)

if __name__ == '__main__':
    print(f'Serving on port {settings.port}')
    app.run(
        host='127.0.0.1',
        port=settings.port,
        debug=True,
    )
