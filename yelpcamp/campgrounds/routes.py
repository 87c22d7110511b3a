"""
Campground routes.

Browsers can only submit GET and POST, so edits and deletes are POSTs to
``/<id>/edit`` and ``/<id>/delete``.
"""

from flask import flash, redirect, render_template, url_for
from flask_login import current_user

from yelpcamp.campgrounds import campgrounds_bp
from yelpcamp.campgrounds.forms import CampgroundForm
from yelpcamp.campgrounds.models import (
    create_campground,
    delete_campground,
    get_campground,
    get_campground_detail,
    list_campgrounds,
    update_campground,
)
from yelpcamp.decorators import campground_author_required, login_required
from yelpcamp.reviews.forms import ReviewForm


@campgrounds_bp.route('')
def index():
    return render_template('campgrounds/index.html', campgrounds=list_campgrounds())


@campgrounds_bp.route('/new')
@login_required
def new():
    return render_template('campgrounds/new.html', form=CampgroundForm())


@campgrounds_bp.route('', methods=['POST'])
@login_required
def create():
    form = CampgroundForm()
    if not form.validate_on_submit():
        return render_template('campgrounds/new.html', form=form), 400

    campground_id = create_campground(form.to_document(), current_user.id)
    flash('Successfully made a new campground!', 'success')
    return redirect(url_for('campgrounds.show', campground_id=campground_id))


@campgrounds_bp.route('/<campground_id>')
def show(campground_id):
    campground = get_campground_detail(campground_id)
    if campground is None:
        flash('Cannot find that campground!', 'error')
        return redirect(url_for('campgrounds.index'))
    return render_template(
        'campgrounds/show.html',
        campground=campground,
        review_form=ReviewForm(),
    )


@campgrounds_bp.route('/<campground_id>/edit', methods=['GET', 'POST'])
@campground_author_required
def edit(campground_id):
    campground = get_campground(campground_id)
    form = CampgroundForm(data=campground)

    if form.validate_on_submit():
        update_campground(campground_id, form.to_document())
        flash('Successfully updated campground!', 'success')
        return redirect(url_for('campgrounds.show', campground_id=campground_id))

    return render_template('campgrounds/edit.html', form=form, campground=campground)


@campgrounds_bp.route('/<campground_id>/delete', methods=['POST'])
@campground_author_required
def delete(campground_id):
    delete_campground(campground_id)
    flash('Successfully deleted campground', 'success')
    return redirect(url_for('campgrounds.index'))
