"""Named cache profiles for responses that opt in."""

from __future__ import annotations

from dataclasses import dataclass
from functools import wraps
from typing import Dict, Mapping

from flask import current_app, make_response

LOCATION_ANY = "any"
LOCATION_CLIENT = "client"
LOCATION_NONE = "none"


@dataclass(frozen=True)
class CacheProfile:
    duration: int = 0
    location: str = LOCATION_ANY
    no_store: bool = False

    def apply(self, response) -> None:
        cache_control = response.cache_control
        if self.no_store:
            cache_control.no_store = True
            return
        if self.location == LOCATION_CLIENT:
            cache_control.private = True
        elif self.location == LOCATION_ANY:
            cache_control.public = True
        else:
            cache_control.no_cache = True
        cache_control.max_age = self.duration


def load_cache_profiles(raw: Mapping[str, Mapping]) -> Dict[str, CacheProfile]:
    return {name: CacheProfile(**dict(values)) for name, values in raw.items()}


def cache_profile(name: str):
    """Apply the named profile's Cache-Control header to successful responses."""

    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            response = make_response(f(*args, **kwargs))
            if response.status_code < 400:
                profiles = current_app.extensions["cache_profiles"]
                profiles[name].apply(response)
            return response
        return decorated_function
    return decorator
