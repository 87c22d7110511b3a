from flask import flash, redirect, url_for
from flask_login import current_user

from yelpcamp.decorators import login_required, review_author_required
from yelpcamp.reviews import reviews_bp
from yelpcamp.reviews.forms import ReviewForm
from yelpcamp.reviews.models import create_review, delete_review


@reviews_bp.route('', methods=['POST'])
@login_required
def create(campground_id):
    form = ReviewForm()
    if not form.validate_on_submit():
        for errors in form.errors.values():
            for message in errors:
                flash(message, 'error')
        return redirect(url_for('campgrounds.show', campground_id=campground_id))

    if create_review(campground_id, current_user.id, form.body.data.strip(), form.rating.data) is None:
        flash('Cannot find that campground!', 'error')
        return redirect(url_for('campgrounds.index'))

    flash('Created new review!', 'success')
    return redirect(url_for('campgrounds.show', campground_id=campground_id))


@reviews_bp.route('/<review_id>/delete', methods=['POST'])
@review_author_required
def delete(campground_id, review_id):
    delete_review(campground_id, review_id)
    flash('Successfully deleted review', 'success')
    return redirect(url_for('campgrounds.show', campground_id=campground_id))
