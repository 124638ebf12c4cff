"""The signed-in principal handed to Flask-Login."""

from __future__ import annotations

from typing import List, Optional

from flask_login import UserMixin

from ...models import SimpleAuthSettings, SimpleAuthUser

# Role claim type issued by ASP.NET-style identity providers
LONG_ROLE_CLAIM_TYPE = "http://schemas.microsoft.com/ws/2008/06/identity/claims/role"


class SiteUser(UserMixin):
    """A configured SimpleAuth user with its claims resolved."""

    def __init__(self, user: SimpleAuthUser, settings: SimpleAuthSettings) -> None:
        self.user = user
        self.settings = settings
        self.authentication_scheme = settings.authentication_scheme

    def get_id(self) -> str:
        return self.user.user_name

    @property
    def user_name(self) -> str:
        return self.user.user_name

    @property
    def roles(self) -> List[str]:
        roles = self.user.claim_values(self.settings.role_claim_type)
        roles.extend(self.user.claim_values(LONG_ROLE_CLAIM_TYPE))
        return roles

    @property
    def display_name(self) -> str:
        return (
            self.user.display_name
            or self.user.first_claim(self.settings.display_name_claim_type)
            or self.user.user_name
        )

    @property
    def email(self) -> str:
        return self.user.email or self.user.first_claim(self.settings.email_claim_type) or ""

    @property
    def project_id(self) -> Optional[str]:
        return self.user.first_claim(self.settings.project_claim_type)

    @property
    def claims(self):
        return list(self.user.claims)

    def is_in_role(self, role: str) -> bool:
        return role.lower() in (held.lower() for held in self.roles)

    def __repr__(self) -> str:
        return f"<SiteUser {self.user_name!r} roles={self.roles!r}>"
