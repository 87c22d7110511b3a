from flask_wtf import FlaskForm
from wtforms import FloatField, StringField, TextAreaField
from wtforms.validators import DataRequired, InputRequired, Length, NumberRange, Optional, URL


class CampgroundForm(FlaskForm):
    title = StringField(
        'Title',
        validators=[DataRequired(message='Title is required.'), Length(max=100)],
    )
    location = StringField(
        'Location',
        validators=[DataRequired(message='Location is required.'), Length(max=200)],
    )
    price = FloatField(
        'Price',
        validators=[
            InputRequired(message='Price is required.'),
            NumberRange(min=0, message='Price cannot be negative.'),
        ],
    )
    description = TextAreaField(
        'Description',
        validators=[DataRequired(message='Description is required.'), Length(max=5000)],
    )
    image = StringField(
        'Image URL',
        validators=[Optional(), URL(message='Please enter a valid image URL.'), Length(max=500)],
    )

    def to_document(self) -> dict:
        return {
            'title': self.title.data.strip(),
            'location': self.location.data.strip(),
            'price': self.price.data,
            'description': self.description.data.strip(),
            'image': (self.image.data or '').strip() or None,
        }
