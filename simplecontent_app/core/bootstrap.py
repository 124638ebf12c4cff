"""Bootstrap helpers for configuring the Flask application.

This is the composition root: configuration layers, the service container,
authorization policies, cookie authentication, blueprints and the
conventional route table are all wired here, in that order.
"""

from __future__ import annotations

from typing import Mapping, Optional

from flask import Flask
from flask_login import current_user

from ..models import (
    CookieAuthOptions,
    FileManagerOptions,
    NavigationOptions,
    ProjectSettings,
    SimpleAuthSettings,
    SimpleAuthUser,
)
from .authorization import PolicyRegistry, configure_auth_policies
from .caching import load_cache_profiles
from .configuration import ConfigurationBuilder, ConfigurationRoot
from .error_handlers import register_error_handlers
from .extensions import csrf_protect, login_manager
from .hosting import HostingEnvironment
from .logging_config import setup_logging
from .options import OptionsMonitor, bind
from .routing import ControllerRegistry, RouteTable, register_route_table
from .services import ServiceCollection, ServiceProvider


def build_configuration(
    env: HostingEnvironment,
    app_config: Mapping,
    environ: Optional[Mapping[str, str]] = None,
) -> ConfigurationRoot:
    """Layer the settings files; later sources override earlier ones."""

    builder = (
        ConfigurationBuilder()
        .set_base_path(env.content_root_path)
        .add_json_file(app_config["APPSETTINGS_FILE"], optional=True, reload_on_change=True)
        .add_json_file(f"appsettings.{env.environment_name}.json", optional=True)
        .add_json_file(app_config["SIMPLEAUTH_SETTINGS_FILE"], optional=True, reload_on_change=True)
        .add_json_file(app_config["SIMPLECONTENT_SETTINGS_FILE"], optional=True, reload_on_change=True)
        .add_environment_variables(prefix=app_config.get("ENVIRONMENT_VARIABLES_PREFIX"), environ=environ)
    )
    return builder.build()


def configure_logging(app: Flask, configuration: ConfigurationRoot, env: HostingEnvironment) -> None:
    """Configure console (and optional file) logging from the Logging section."""

    setup_logging(app, configuration.get_section("Logging"), env.content_root_path)
    app.logger.info(
        "Hosting environment: %s, content root: %s", env.environment_name, env.content_root_path
    )


def configure_services(
    app: Flask, configuration: ConfigurationRoot, env: HostingEnvironment
) -> ServiceProvider:
    """Register options and services; returns the built provider."""

    # Late imports: feature modules import core helpers
    from ..modules.content.interfaces import IProjectQueries, IProjectSecurityResolver
    from ..modules.content.project_queries import ConfigProjectQueries
    from ..modules.content.security import SimpleAuthProjectSecurityResolver
    from ..modules.filemanager.service import FileManagerService
    from ..modules.navigation.service import NavigationService
    from ..modules.simpleauth.user_store import SimpleAuthUserStore

    services = ServiceCollection()

    # users and settings from simpleauth-settings.json
    services.configure("SimpleAuthSettings", OptionsMonitor.for_type(configuration, "SimpleAuthSettings", SimpleAuthSettings))
    services.configure("Users", OptionsMonitor.for_list(configuration, "Users", SimpleAuthUser))
    # content project settings from simplecontent-settings.json
    services.configure("ContentProjects", OptionsMonitor.for_list(configuration, "ContentProjects", ProjectSettings))
    services.configure("NavigationOptions", OptionsMonitor.for_type(configuration, "NavigationOptions", NavigationOptions))
    services.configure("FileManagerOptions", OptionsMonitor.for_type(configuration, "FileManagerOptions", FileManagerOptions))

    services.add_singleton(PolicyRegistry, lambda provider: configure_auth_policies(PolicyRegistry()))
    services.add_singleton(RouteTable, build_route_table)
    services.add_scoped(SimpleAuthUserStore, SimpleAuthUserStore)
    services.add_scoped(IProjectQueries, ConfigProjectQueries)

    # This resolver integrates SimpleAuth. To use another authentication
    # system, register your own IProjectSecurityResolver here.
    services.add_scoped(IProjectSecurityResolver, SimpleAuthProjectSecurityResolver)

    services.add_singleton(
        NavigationService, lambda provider: NavigationService(provider, env.content_root_path)
    )

    def file_manager_factory(provider: ServiceProvider) -> FileManagerService:
        options = provider.options("FileManagerOptions")
        return FileManagerService(env.resolve(options.media_root_path), options)

    services.add_scoped(FileManagerService, file_manager_factory)

    provider = services.build_provider()
    app.extensions["services"] = provider
    app.extensions["configuration"] = configuration
    return provider


def register_extensions(app: Flask, configuration: ConfigurationRoot) -> CookieAuthOptions:
    """Initialize Flask-Login cookie authentication and CSRF protection."""

    cookie_options = bind(configuration.get_section("CookieAuthOptions"), CookieAuthOptions)
    app.config["SESSION_COOKIE_NAME"] = cookie_options.cookie_name
    app.config.setdefault("REMEMBER_COOKIE_NAME", f"{cookie_options.cookie_name}.remember")
    app.extensions["cookie_auth"] = cookie_options

    login_manager.login_view = cookie_options.login_path
    login_manager.init_app(app)
    csrf_protect.init_app(app)

    if not cookie_options.automatic_authenticate:
        app.logger.warning("AutomaticAuthenticate=false is not supported; the auth cookie is always read.")

    app.logger.info(
        "Cookie authentication: scheme=%s cookie=%s login=%s denied=%s",
        cookie_options.authentication_scheme,
        cookie_options.cookie_name,
        cookie_options.login_path,
        cookie_options.access_denied_path,
    )
    return cookie_options


def register_context_processors(app: Flask) -> None:
    """Register the user loader and global template context processors."""

    from ..modules.navigation.service import NavigationService
    from ..modules.simpleauth.user_store import SimpleAuthUserStore
    from .services import get_service

    @login_manager.user_loader
    def load_user(user_id: str):
        return get_service(SimpleAuthUserStore).load_principal(user_id)

    @app.context_processor
    def inject_navigation() -> dict[str, object]:
        return {"navigation": get_service(NavigationService).visible_nodes(current_user)}

    @app.context_processor
    def inject_user() -> dict[str, object]:
        return {"current_user": current_user}


def register_blueprints(app: Flask) -> None:
    """Register content static resources, file manager and content routes.

    Werkzeug matches these rules before the conventional catch-all, which is
    added later by ``register_routes``.
    """

    from ..modules.content.routes import content_bp, static_resources_bp
    from ..modules.filemanager.routes import filemanager_bp

    for blueprint, url_prefix in (
        (static_resources_bp, "/cr"),
        (filemanager_bp, "/filemanager"),
        (content_bp, None),
    ):
        app.register_blueprint(blueprint, url_prefix=url_prefix)
        app.logger.debug("Registered blueprint %s at %s", blueprint.name, url_prefix or "/")


def build_route_table(provider: Optional[ServiceProvider] = None) -> RouteTable:
    """Controllers and conventional routes, in matching order."""

    from ..modules.home.controllers import HomeController
    from ..modules.simpleauth.controllers import LoginController

    controllers = ControllerRegistry()
    controllers.register(HomeController)
    controllers.register(LoginController)

    route_table = RouteTable(controllers)
    # needed for the SimpleAuth login endpoints, e.g. /login/logoff
    route_table.map_route("def", "{controller}/{action}")
    # not really the default route while the content pages own "/"
    route_table.map_route("default", "{controller=Home}/{action=Index}/{id?}")
    return route_table


def register_routes(app: Flask) -> RouteTable:
    """Attach the route table after every blueprint is in place."""

    route_table = app.extensions["services"].get(RouteTable)
    register_route_table(app, route_table)
    return route_table


def configure_cache_profiles(app: Flask) -> None:
    app.extensions["cache_profiles"] = load_cache_profiles(app.config["CACHE_PROFILES"])


def configure_reload(app: Flask, configuration: ConfigurationRoot) -> None:
    """Pick up edits to watched settings files before each request."""

    @app.before_request
    def reload_changed_settings():
        configuration.reload_if_changed()


def configure_error_pages(app: Flask, env: HostingEnvironment) -> None:
    """Developer diagnostics in Development, re-executed error pages elsewhere."""

    register_error_handlers(app, is_development=env.is_development())
    if env.is_development():
        app.debug = True
