"""
Central signal registry for the SimpleContent host.

Usage:
    # Publisher (sender)
    from simplecontent_app.core.signals import user_signed_in
    user_signed_in.send(current_app._get_current_object(), user=user)

    # Subscriber (receiver)
    @user_signed_in.connect
    def on_signed_in(sender, **kwargs):
        ...
"""
from blinker import Namespace

# ============================================
# Configuration Signals
# ============================================
configuration_signals = Namespace()

# Signal: Fired after a watched settings file changed and the layers were reloaded
# Payload: version (int)
configuration_reloaded = configuration_signals.signal('configuration_reloaded')

# ============================================
# Authentication Signals
# ============================================
auth_signals = Namespace()

# Signal: Fired after a SimpleAuth user signs in
# Payload: user (SiteUser)
user_signed_in = auth_signals.signal('user_signed_in')

# Signal: Fired after a user signs out
# Payload: user_name (str)
user_signed_out = auth_signals.signal('user_signed_out')

# ============================================
# File Manager Signals
# ============================================
filemanager_signals = Namespace()

# Signal: Fired when a file or folder under the media root is deleted
# Payload: virtual_path (str), user_name (str)
media_deleted = filemanager_signals.signal('media_deleted')
