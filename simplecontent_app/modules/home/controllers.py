# File: simplecontent_app/modules/home/controllers.py
# Home controller. The content pages own "/", so this controller answers at
# /home unless the standard content routes are left out.

from flask import g, render_template
from werkzeug.http import HTTP_STATUS_CODES

from ...core.routing import Controller, action


class HomeController(Controller):
    name = 'home'

    @action()
    def index(self):
        return render_template('home/index.html')

    @action()
    def about(self):
        return render_template('home/about.html')

    @action()
    def error(self, id=None):
        """Error page; reached by re-execution with the original status code."""
        status_code = int(id) if id and str(id).isdigit() else 500
        return render_template(
            'home/error.html',
            status_code=status_code,
            reason=HTTP_STATUS_CODES.get(status_code, 'Error'),
            original_path=g.get('original_path'),
        ), status_code
