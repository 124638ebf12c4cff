"""Application factory for the SimpleContent site host."""

from __future__ import annotations

from typing import Mapping, Optional

from flask import Flask

from .core.bootstrap import (
    build_configuration,
    configure_cache_profiles,
    configure_error_pages,
    configure_logging,
    configure_reload,
    configure_services,
    register_blueprints,
    register_context_processors,
    register_extensions,
    register_routes,
)
from .core.config import Config
from .core.hosting import HostingEnvironment

__all__ = ["create_app"]


def create_app(
    config_class: type[Config] = Config,
    environment: Optional[str] = None,
    content_root: Optional[str] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> Flask:
    """Create and configure a Flask application instance."""

    env = HostingEnvironment()
    if environment:
        env.environment_name = environment
    if content_root:
        env.content_root_path = str(content_root)

    app = Flask(__name__)
    app.config.from_object(config_class)
    app.extensions["hosting_environment"] = env

    configuration = build_configuration(env, app.config, environ)

    configure_logging(app, configuration, env)
    configure_services(app, configuration, env)
    register_extensions(app, configuration)
    configure_cache_profiles(app)
    register_context_processors(app)
    register_blueprints(app)
    register_routes(app)
    configure_reload(app, configuration)
    configure_error_pages(app, env)

    return app
