# File: simplecontent_app/core/extensions.py
# Infrastructure Layer: Flask Extensions initialization

from flask_login import LoginManager
from flask_wtf import CSRFProtect

# 1. Cookie authentication (SimpleAuth)
login_manager = LoginManager()
login_manager.login_message = "Please sign in to access this page."
login_manager.login_message_category = "info"

# 2. Security
csrf_protect = CSRFProtect()

__all__ = ["login_manager", "csrf_protect"]
