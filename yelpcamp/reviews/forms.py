from flask_wtf import FlaskForm
from wtforms import IntegerField, TextAreaField
from wtforms.validators import DataRequired, InputRequired, Length, NumberRange


class ReviewForm(FlaskForm):
    rating = IntegerField(
        'Rating',
        default=5,
        validators=[
            InputRequired(message='Rating is required.'),
            NumberRange(min=1, max=5, message='Rating must be between 1 and 5.'),
        ],
    )
    body = TextAreaField(
        'Review',
        validators=[DataRequired(message='Review text is required.'), Length(max=2000)],
    )
