"""Named authorization policies and the view decorator that enforces them."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from functools import wraps
from typing import Callable, Dict, List

from flask import abort, current_app, redirect
from flask_login import current_user

logger = logging.getLogger(__name__)

Requirement = Callable[[object], bool]

ADMINISTRATORS_ROLE = "Administrators"

BLOG_EDIT_POLICY = "BlogEditPolicy"
PAGE_EDIT_POLICY = "PageEditPolicy"
FILE_MANAGER_POLICY = "FileManagerPolicy"
FILE_MANAGER_DELETE_POLICY = "FileManagerDeletePolicy"


class PolicyNotFoundError(LookupError):
    pass


def require_role(*roles: str) -> Requirement:
    """Pass when the principal is authenticated and holds any of ``roles``."""

    wanted = {role.lower() for role in roles}

    def requirement(principal) -> bool:
        if principal is None or not getattr(principal, "is_authenticated", False):
            return False
        held = {role.lower() for role in getattr(principal, "roles", ())}
        return bool(wanted & held)

    requirement.__name__ = f"require_role({', '.join(roles)})"
    return requirement


@dataclass
class AuthorizationPolicy:
    name: str
    requirements: List[Requirement] = field(default_factory=list)

    def evaluate(self, principal) -> bool:
        return all(requirement(principal) for requirement in self.requirements)


class PolicyRegistry:
    def __init__(self) -> None:
        self._policies: Dict[str, AuthorizationPolicy] = {}

    def add_policy(self, name: str, *requirements: Requirement) -> AuthorizationPolicy:
        policy = AuthorizationPolicy(name, list(requirements))
        self._policies[name] = policy
        return policy

    def get(self, name: str) -> AuthorizationPolicy:
        try:
            return self._policies[name]
        except KeyError:
            raise PolicyNotFoundError(f"Authorization policy '{name}' is not registered") from None

    def authorize(self, principal, name: str) -> bool:
        return self.get(name).evaluate(principal)

    def __contains__(self, name: str) -> bool:
        return name in self._policies


def configure_auth_policies(registry: PolicyRegistry) -> PolicyRegistry:
    """Declare the host policies.

    Every policy currently means "member of Administrators"; there is no
    per-project distinction for multi-tenant sites yet.
    """

    registry.add_policy(BLOG_EDIT_POLICY, require_role(ADMINISTRATORS_ROLE))
    registry.add_policy(PAGE_EDIT_POLICY, require_role(ADMINISTRATORS_ROLE))
    registry.add_policy(FILE_MANAGER_POLICY, require_role(ADMINISTRATORS_ROLE))
    registry.add_policy(FILE_MANAGER_DELETE_POLICY, require_role(ADMINISTRATORS_ROLE))
    return registry


def policy_required(policy_name: str):
    """
    Route decorator enforcing a named policy.

    Anonymous users are challenged (sent to the login path); signed-in users
    failing the policy are sent to the access denied path, or get a 403 when
    that path is empty.
    """
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            from .services import get_service

            registry = get_service(PolicyRegistry)
            if registry.authorize(current_user, policy_name):
                return f(*args, **kwargs)

            cookie_options = current_app.extensions["cookie_auth"]
            if not current_user.is_authenticated and cookie_options.automatic_challenge:
                return current_app.login_manager.unauthorized()

            logger.info(
                "User %s denied by policy %s",
                getattr(current_user, "user_name", "<anonymous>"),
                policy_name,
            )
            if cookie_options.access_denied_path:
                return redirect(cookie_options.access_denied_path)
            abort(403)
        return decorated_function
    return decorator
