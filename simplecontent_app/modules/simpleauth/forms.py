# File: simplecontent_app/modules/simpleauth/forms.py
# Login and password hasher forms.

from flask_wtf import FlaskForm
from wtforms import BooleanField, HiddenField, PasswordField, StringField, SubmitField
from wtforms.validators import DataRequired


class LoginForm(FlaskForm):
    """
    Sign-in form.
    """
    username = StringField('User name', validators=[DataRequired(message="Please enter your user name.")])
    password = PasswordField('Password', validators=[DataRequired(message="Please enter your password.")])
    remember_me = BooleanField('Remember me')
    next = HiddenField()
    submit = SubmitField('Sign in')


class PasswordHashForm(FlaskForm):
    """
    Produces a hash to paste into simpleauth-settings.json instead of a clear-text password.
    """
    password = PasswordField('Password', validators=[DataRequired(message="Please enter a password.")])
    submit = SubmitField('Hash password')
