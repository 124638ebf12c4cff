"""Users declared in simpleauth-settings.json."""

from __future__ import annotations

import hmac
import logging
from typing import List, Optional

from werkzeug.security import check_password_hash, generate_password_hash

from ...models import SimpleAuthSettings, SimpleAuthUser
from .principal import SiteUser

logger = logging.getLogger(__name__)

HASH_PREFIXES = ("pbkdf2:", "scrypt:")


def is_password_hash(value: str) -> bool:
    return value.startswith(HASH_PREFIXES) and "$" in value


def hash_password(password: str) -> str:
    return generate_password_hash(password)


class SimpleAuthUserStore:
    """Reads the current ``Users`` options on every call so edits apply after reload."""

    def __init__(self, services) -> None:
        self.services = services

    @property
    def settings(self) -> SimpleAuthSettings:
        return self.services.options("SimpleAuthSettings")

    @property
    def users(self) -> List[SimpleAuthUser]:
        return self.services.options("Users")

    def find(self, user_name: str) -> Optional[SimpleAuthUser]:
        if not user_name:
            return None
        wanted = user_name.strip().lower()
        for user in self.users:
            if user.user_name.lower() == wanted:
                return user
        return None

    def load_principal(self, user_name: str) -> Optional[SiteUser]:
        user = self.find(user_name)
        if user is None:
            return None
        return SiteUser(user, self.settings)

    def validate(self, user_name: str, password: str) -> Optional[SiteUser]:
        """Return the principal when the credentials match, otherwise None."""

        user = self.find(user_name)
        if user is None or not user.password or password is None:
            logger.info("Sign-in rejected for unknown user %s", user_name)
            return None

        if is_password_hash(user.password):
            valid = check_password_hash(user.password, password)
        else:
            valid = hmac.compare_digest(user.password.encode("utf-8"), password.encode("utf-8"))

        if not valid:
            logger.info("Sign-in rejected for %s: bad password", user_name)
            return None
        return SiteUser(user, self.settings)
