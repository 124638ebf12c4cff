# File: simplecontent_app/core/config.py
# Flask-level settings. Site settings live in the JSON configuration layers.

import os
from dotenv import load_dotenv

load_dotenv()

# Repository root, where appsettings.json and friends are looked up by default
BASE_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), '..', '..'))


class Config:
    """Flask configuration for the SimpleContent host."""

    SECRET_KEY = os.environ.get('SECRET_KEY')
    if not SECRET_KEY:
        # Fallback for development, though env is preferred
        SECRET_KEY = 'dev-secret-key-replace-in-production'

    WTF_CSRF_ENABLED = True

    # Named cache profiles applied by the cache_profile decorator
    CACHE_PROFILES = {
        'SiteMapCacheProfile': {'duration': 30},
        'RssCacheProfile': {'duration': 100},
    }

    # Site settings files, resolved against the content root
    APPSETTINGS_FILE = 'appsettings.json'
    SIMPLEAUTH_SETTINGS_FILE = 'simpleauth-settings.json'
    SIMPLECONTENT_SETTINGS_FILE = 'simplecontent-settings.json'

    # Prefix stripped from environment variables; None reads them all
    ENVIRONMENT_VARIABLES_PREFIX = os.environ.get('SIMPLECONTENT_ENV_PREFIX') or None
