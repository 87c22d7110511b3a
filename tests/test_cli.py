"""
Tests for the seed-db CLI command.
"""

from yelpcamp.cli import DEMO_USERNAME, SAMPLE_CAMPGROUNDS


class TestSeedDb:

    def test_seed_creates_demo_user_and_campgrounds(self, app, db):
        result = app.test_cli_runner().invoke(args=['seed-db'])

        assert result.exit_code == 0
        assert 'Demo user created' in result.output
        demo = db.users.find_one({'username': DEMO_USERNAME})
        assert db.campgrounds.count_documents({'author': demo['_id']}) == len(SAMPLE_CAMPGROUNDS)

    def test_seed_twice_reuses_demo_user(self, app, db):
        runner = app.test_cli_runner()
        runner.invoke(args=['seed-db'])
        result = runner.invoke(args=['seed-db'])

        assert 'Demo user exists' in result.output
        assert db.users.count_documents({'username': DEMO_USERNAME}) == 1
        assert db.campgrounds.count_documents({}) == 2 * len(SAMPLE_CAMPGROUNDS)

    def test_reset_removes_existing_campgrounds(self, app, db, campground_id):
        result = app.test_cli_runner().invoke(args=['seed-db', '--reset'])

        assert result.exit_code == 0
        assert db.campgrounds.count_documents({}) == len(SAMPLE_CAMPGROUNDS)
        assert db.campgrounds.count_documents({'title': 'Misty Pines', 'location': 'Bend, Oregon'}) == 1

    def test_seeded_demo_user_can_log_in(self, app, client):
        app.test_cli_runner().invoke(args=['seed-db'])
        response = client.post('/login', data={'username': 'demo', 'password': 'SecureP@ss123!'})
        assert response.status_code == 302
        assert response.headers['Location'].endswith('/campgrounds')
