# File: simplecontent_app/models/auth.py
# Settings and users for SimpleAuth, bound from simpleauth-settings.json.

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class UserClaim:
    claim_type: str = ""
    claim_value: str = ""


@dataclass
class SimpleAuthUser:
    """A user declared in the ``Users`` section."""

    user_name: str = ""
    password: str = ""
    display_name: str = ""
    email: str = ""
    claims: List[UserClaim] = field(default_factory=list)

    def claim_values(self, claim_type: str) -> List[str]:
        wanted = claim_type.lower()
        return [claim.claim_value for claim in self.claims if claim.claim_type.lower() == wanted]

    def first_claim(self, claim_type: str) -> Optional[str]:
        values = self.claim_values(claim_type)
        return values[0] if values else None


@dataclass
class SimpleAuthSettings:
    authentication_scheme: str = "application"
    enable_password_hasher_ui: bool = False
    role_claim_type: str = "Role"
    display_name_claim_type: str = "DisplayName"
    email_claim_type: str = "Email"
    project_claim_type: str = "ProjectId"


@dataclass
class CookieAuthOptions:
    """Cookie authentication wiring used by SimpleAuth."""

    authentication_scheme: str = "application"
    cookie_name: str = "application"
    login_path: str = "/login"
    access_denied_path: str = "/"
    automatic_authenticate: bool = True
    automatic_challenge: bool = True
