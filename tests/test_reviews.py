"""
Tests for adding and deleting campground reviews.
"""

from bson import ObjectId

from conftest import OTHER_PASSWORD, OTHER_USERNAME, login


def _post_review(client, campground_id, rating='4', body='Quiet and clean.', **kwargs):
    return client.post(
        f'/campgrounds/{campground_id}/reviews',
        data={'rating': rating, 'body': body},
        **kwargs,
    )


def _only_review(db):
    return db.reviews.find_one({})


class TestCreateReview:

    def test_create_links_review_to_campground(self, authenticated_client, campground_id, db):
        response = _post_review(authenticated_client, campground_id)
        assert response.headers['Location'].endswith(f'/campgrounds/{campground_id}')

        review = _only_review(db)
        campground = db.campgrounds.find_one({'_id': ObjectId(campground_id)})
        author = db.users.find_one({'username': 'camper'})
        assert review['rating'] == 4
        assert review['author'] == author['_id']
        assert campground['reviews'] == [review['_id']]

    def test_review_shown_on_campground(self, authenticated_client, campground_id):
        response = _post_review(authenticated_client, campground_id, follow_redirects=True)
        assert b'Created new review!' in response.data
        assert b'Quiet and clean.' in response.data
        assert b'Rated: 4 / 5' in response.data
        assert b'By camper' in response.data

    def test_requires_login(self, client, campground_id, db):
        response = _post_review(client, campground_id)
        assert response.headers['Location'].endswith('/login')
        assert db.reviews.count_documents({}) == 0

    def test_invalid_rating_flashes_errors(self, authenticated_client, campground_id, db):
        response = _post_review(
            authenticated_client, campground_id, rating='9', body='', follow_redirects=True,
        )
        assert b'Rating must be between 1 and 5.' in response.data
        assert b'Review text is required.' in response.data
        assert db.reviews.count_documents({}) == 0

    def test_missing_campground(self, authenticated_client, db):
        response = _post_review(authenticated_client, ObjectId(), follow_redirects=True)
        assert b'Cannot find that campground!' in response.data
        assert db.reviews.count_documents({}) == 0


class TestDeleteReview:

    def test_author_deletes(self, authenticated_client, campground_id, db):
        _post_review(authenticated_client, campground_id)
        review_id = _only_review(db)['_id']

        response = authenticated_client.post(
            f'/campgrounds/{campground_id}/reviews/{review_id}/delete',
            follow_redirects=True,
        )

        assert b'Successfully deleted review' in response.data
        assert db.reviews.count_documents({}) == 0
        assert db.campgrounds.find_one({'_id': ObjectId(campground_id)})['reviews'] == []

    def test_other_user_cannot_delete(self, client, campground_id, db):
        login(client)
        _post_review(client, campground_id)
        review_id = _only_review(db)['_id']
        client.post('/logout')

        login(client, OTHER_USERNAME, OTHER_PASSWORD)
        response = client.post(
            f'/campgrounds/{campground_id}/reviews/{review_id}/delete',
            follow_redirects=True,
        )

        assert b'You do not have permission to do that!' in response.data
        assert db.reviews.count_documents({}) == 1

    def test_unknown_review(self, authenticated_client, campground_id):
        response = authenticated_client.post(
            f'/campgrounds/{campground_id}/reviews/{ObjectId()}/delete',
            follow_redirects=True,
        )
        assert b'You do not have permission to do that!' in response.data

    def test_review_must_belong_to_campground_in_path(self, authenticated_client, campground_id, app, db):
        from yelpcamp.campgrounds.models import create_campground

        author = db.users.find_one({'username': 'camper'})
        with app.app_context():
            other_id = create_campground(
                {'title': 'Dusty Mesa', 'location': 'Moab, Utah', 'price': 12.0,
                 'description': 'Open desert sites.', 'image': None},
                author['_id'],
            )
        _post_review(authenticated_client, campground_id)
        review_id = _only_review(db)['_id']

        response = authenticated_client.post(
            f'/campgrounds/{other_id}/reviews/{review_id}/delete',
            follow_redirects=True,
        )

        assert b'You do not have permission to do that!' in response.data
        assert db.reviews.count_documents({'_id': review_id}) == 1
        campground = db.campgrounds.find_one({'_id': ObjectId(campground_id)})
        assert campground['reviews'] == [review_id]
