"""
Flask CLI commands.

Usage:
    flask --app run seed-db
"""

import click
from flask import Flask

from yelpcamp.campgrounds.models import create_campground
from yelpcamp.db import get_db
from yelpcamp.users.models import UsernameTaken, create_user, get_user_by_username

DEMO_USERNAME = 'demo'
DEMO_PASSWORD = 'SecureP@ss123!'

SAMPLE_CAMPGROUNDS = [
    {
        'title': 'Misty Pines',
        'location': 'Bend, Oregon',
        'price': 18.0,
        'description': 'Shaded sites under old-growth pines, ten minutes from the river.',
        'image': 'https://images.unsplash.com/photo-1504280390367-361c6d9f38f4',
    },
    {
        'title': 'Dusty Mesa',
        'location': 'Moab, Utah',
        'price': 12.5,
        'description': 'Open desert sites with a view of the arches at sunset.',
        'image': None,
    },
    {
        'title': 'Lakeside Hollow',
        'location': 'Ely, Minnesota',
        'price': 22.0,
        'description': 'Canoe-in sites on a quiet lake. Bring bug spray.',
        'image': None,
    },
]


def register_commands(app: Flask) -> None:

    @app.cli.command('seed-db')
    @click.option('--reset', is_flag=True, help='Delete all campgrounds and reviews first.')
    def seed_db(reset):
        """Create a demo user and a few sample campgrounds."""
        db = get_db()
        if reset:
            db.reviews.delete_many({})
            db.campgrounds.delete_many({})

        try:
            user = create_user(DEMO_USERNAME, 'demo@example.com', DEMO_PASSWORD)
            click.echo(f'Demo user created: {DEMO_USERNAME} / {DEMO_PASSWORD}')
        except UsernameTaken:
            user = get_user_by_username(DEMO_USERNAME)
            click.echo(f'Demo user exists: {DEMO_USERNAME}')

        for campground in SAMPLE_CAMPGROUNDS:
            create_campground(campground, user.id)
        click.echo(f'Created {len(SAMPLE_CAMPGROUNDS)} campgrounds.')
