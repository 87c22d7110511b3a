"""
Reviews stored in the ``reviews`` collection.

Documents: {_id, body, rating, author, campground}. The campground keeps the
list of its review ids, so creating or deleting a review touches both
collections.
"""

from typing import List, Optional

from yelpcamp.db import get_db, to_object_id


def get_review(review_id) -> Optional[dict]:
    object_id = to_object_id(review_id)
    if object_id is None:
        return None
    return get_db().reviews.find_one({'_id': object_id})


def list_reviews(review_ids: List) -> List[dict]:
    """Reviews in ``review_ids`` order, each with ``author_name`` set."""
    if not review_ids:
        return []
    db = get_db()
    reviews = {r['_id']: r for r in db.reviews.find({'_id': {'$in': review_ids}})}
    authors = {
        u['_id']: u['username']
        for u in db.users.find(
            {'_id': {'$in': list({r['author'] for r in reviews.values()})}},
            {'username': 1},
        )
    }

    ordered = []
    for review_id in review_ids:
        review = reviews.get(review_id)
        if review is None:
            continue
        review['author_name'] = authors.get(review['author'], '[deleted]')
        ordered.append(review)
    return ordered


def create_review(campground_id, author_id, body: str, rating: int) -> Optional[str]:
    """Attach a new review to a campground. None if the campground is gone."""
    object_id = to_object_id(campground_id)
    if object_id is None:
        return None
    db = get_db()
    if db.campgrounds.find_one({'_id': object_id}, {'_id': 1}) is None:
        return None

    result = db.reviews.insert_one({
        'body': body,
        'rating': rating,
        'author': author_id,
        'campground': object_id,
    })
    db.campgrounds.update_one({'_id': object_id}, {'$push': {'reviews': result.inserted_id}})
    return str(result.inserted_id)


def delete_review(campground_id, review_id) -> bool:
    campground_oid = to_object_id(campground_id)
    review_oid = to_object_id(review_id)
    if campground_oid is None or review_oid is None:
        return False
    db = get_db()
    db.campgrounds.update_one({'_id': campground_oid}, {'$pull': {'reviews': review_oid}})
    result = db.reviews.delete_one({'_id': review_oid})
    return result.deleted_count == 1
