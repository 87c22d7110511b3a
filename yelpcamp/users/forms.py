"""
Registration and login forms.

Server-side validation is the authoritative check; the HTML ``required``
attributes are a convenience only.
"""

from flask_wtf import FlaskForm
from wtforms import EmailField, PasswordField, StringField
from wtforms.validators import DataRequired, Email, Length, Regexp


class LoginForm(FlaskForm):
    username = StringField(
        'Username',
        validators=[
            DataRequired(message='Username is required.'),
            Length(max=50, message='Username is too long.'),
        ],
        render_kw={'autofocus': True, 'autocomplete': 'username'},
    )

    password = PasswordField(
        'Password',
        validators=[
            DataRequired(message='Password is required.'),
            # bcrypt only reads 72 bytes; bound the input anyway.
            Length(max=128, message='Password is too long.'),
        ],
        render_kw={'autocomplete': 'current-password'},
    )


class RegisterForm(FlaskForm):
    username = StringField(
        'Username',
        validators=[
            DataRequired(message='Username is required.'),
            Length(min=3, max=50, message='Username must be 3 to 50 characters.'),
            Regexp(r'^[A-Za-z0-9_-]+$', message='Use letters, digits, "_" and "-" only.'),
        ],
        render_kw={'autofocus': True, 'autocomplete': 'username'},
    )

    email = EmailField(
        'Email',
        validators=[
            DataRequired(message='Email address is required.'),
            Email(message='Please enter a valid email address.'),
            # RFC 5321 limit.
            Length(max=254, message='Email address is too long.'),
        ],
        render_kw={'autocomplete': 'email'},
    )

    password = PasswordField(
        'Password',
        validators=[
            DataRequired(message='Password is required.'),
            Length(min=8, max=128, message='Password must be 8 to 128 characters.'),
        ],
        render_kw={'autocomplete': 'new-password'},
    )
