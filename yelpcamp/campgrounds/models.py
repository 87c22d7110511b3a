"""
Campgrounds stored in the ``campgrounds`` collection.

Documents: {_id, title, location, price, description, image, author, reviews}
where ``author`` is a user ObjectId and ``reviews`` a list of review ObjectIds.
Query filters are always built from parsed ObjectIds and fixed field names,
never from request dictionaries.
"""

from typing import List, Optional

from pymongo import DESCENDING

from yelpcamp.db import get_db, to_object_id

EDITABLE_FIELDS = ('title', 'location', 'price', 'description', 'image')


def list_campgrounds() -> List[dict]:
    return list(get_db().campgrounds.find().sort('_id', DESCENDING))


def get_campground(campground_id) -> Optional[dict]:
    object_id = to_object_id(campground_id)
    if object_id is None:
        return None
    return get_db().campgrounds.find_one({'_id': object_id})


def get_campground_detail(campground_id) -> Optional[dict]:
    """A campground with its author and reviews (each with author) resolved."""
    from yelpcamp.reviews.models import list_reviews

    campground = get_campground(campground_id)
    if campground is None:
        return None

    author = get_db().users.find_one({'_id': campground['author']}, {'username': 1})
    campground['author_name'] = author['username'] if author else '[deleted]'
    campground['review_list'] = list_reviews(campground['reviews'])
    return campground


def create_campground(data: dict, author_id) -> str:
    document = {field: data.get(field) for field in EDITABLE_FIELDS}
    document['author'] = author_id
    document['reviews'] = []
    result = get_db().campgrounds.insert_one(document)
    return str(result.inserted_id)


def update_campground(campground_id, data: dict) -> bool:
    object_id = to_object_id(campground_id)
    if object_id is None:
        return False
    changes = {field: data.get(field) for field in EDITABLE_FIELDS}
    result = get_db().campgrounds.update_one({'_id': object_id}, {'$set': changes})
    return result.matched_count == 1


def delete_campground(campground_id) -> bool:
    """Delete a campground and every review attached to it."""
    object_id = to_object_id(campground_id)
    if object_id is None:
        return False
    db = get_db()
    campground = db.campgrounds.find_one_and_delete({'_id': object_id})
    if campground is None:
        return False
    if campground['reviews']:
        db.reviews.delete_many({'_id': {'$in': campground['reviews']}})
    return True
