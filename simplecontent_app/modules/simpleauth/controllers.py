# File: simplecontent_app/modules/simpleauth/controllers.py
# The SimpleAuth login controller, reached through the conventional routes:
#   /login                -> default route, action index
#   /login/logoff         -> "def" route
#   /login/hashpassword   -> "def" route

from urllib.parse import urlsplit

from flask import abort, current_app, flash, redirect, render_template, request
from flask_login import current_user, login_user, logout_user

from ...core.routing import Controller, action
from ...core.signals import user_signed_in, user_signed_out
from .forms import LoginForm, PasswordHashForm
from .user_store import SimpleAuthUserStore, hash_password


def is_local_url(target: str) -> bool:
    """Only same-site paths are accepted as a post-login destination."""
    if not target or not target.startswith('/') or target.startswith('//') or target.startswith('/\\'):
        return False
    parts = urlsplit(target)
    return not parts.scheme and not parts.netloc


class LoginController(Controller):
    name = 'login'

    @property
    def user_store(self) -> SimpleAuthUserStore:
        return self.services.get(SimpleAuthUserStore)

    @action(methods=('GET', 'POST'))
    def index(self):
        if current_user.is_authenticated:
            return redirect('/')

        form = LoginForm()
        if request.method == 'GET':
            form.next.data = request.args.get('next', '')

        if form.validate_on_submit():
            user = self.user_store.validate(form.username.data, form.password.data)
            if user is None:
                flash('Invalid user name or password.', 'danger')
                return render_template('login/index.html', form=form, error=True)

            login_user(user, remember=form.remember_me.data)
            current_app.logger.info("User %s signed in", user.user_name)
            user_signed_in.send(current_app._get_current_object(), user=user)

            next_page = form.next.data or request.args.get('next')
            if not is_local_url(next_page):
                next_page = '/'
            return redirect(next_page)

        return render_template('login/index.html', form=form, error=False)

    @action(methods=('POST',))
    def logoff(self):
        user_name = getattr(current_user, 'user_name', None)
        logout_user()
        if user_name:
            current_app.logger.info("User %s signed out", user_name)
            user_signed_out.send(current_app._get_current_object(), user_name=user_name)
        return redirect('/')

    @action(methods=('GET', 'POST'))
    def hashpassword(self):
        if not self.user_store.settings.enable_password_hasher_ui:
            abort(404)

        form = PasswordHashForm()
        hashed = None
        if form.validate_on_submit():
            hashed = hash_password(form.password.data)
        return render_template('login/hashpassword.html', form=form, hashed=hashed)
