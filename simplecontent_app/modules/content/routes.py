# File: simplecontent_app/modules/content/routes.py
# Standard content routes plus the static resource route for content assets.
# Storage and editing of posts/pages belong to the content system itself; these
# views only expose the wiring (project settings, security resolver, policies,
# cache profiles).

import os

from flask import Blueprint, Response, abort, render_template, request, send_from_directory

from ...core.authorization import BLOG_EDIT_POLICY, PAGE_EDIT_POLICY, policy_required
from ...core.caching import cache_profile
from ...core.error_handlers import AuthorizationError
from ...core.services import get_service
from .feeds import build_rss, build_sitemap
from .interfaces import IProjectQueries, IProjectSecurityResolver

STATIC_RESOURCES_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), '..', '..', 'static', 'cr'))

static_resources_bp = Blueprint('content_resources', __name__)
content_bp = Blueprint('content', __name__)


@static_resources_bp.route('/<path:filename>')
def static_resource(filename):
    return send_from_directory(STATIC_RESOURCES_DIR, filename)


def _project_and_security():
    project_id = request.args.get('project')
    project = get_service(IProjectQueries).get_project_settings(project_id)
    if project_id and project is None:
        abort(404)
    security = get_service(IProjectSecurityResolver).resolve(project.project_id if project else None)
    return project, security


def _site_url() -> str:
    return request.url_root.rstrip('/')


@content_bp.route('/')
def page_index():
    project, security = _project_and_security()
    slug = project.default_page_slug if project else 'home'
    return render_template('content/page.html', project=project, security=security, slug=slug)


@content_bp.route('/blog')
def blog_index():
    project, security = _project_and_security()
    return render_template('content/blog.html', project=project, security=security)


@content_bp.route('/blog/edit', methods=['GET', 'POST'])
@policy_required(BLOG_EDIT_POLICY)
def blog_edit():
    project, security = _project_and_security()
    if not security.can_edit_posts:
        raise AuthorizationError(f"Posts in {security.project_id} cannot be edited by this user")
    return render_template('content/edit.html', project=project, security=security, kind='post', slug=None)


@content_bp.route('/page/edit', methods=['GET', 'POST'])
@content_bp.route('/page/edit/<slug>', methods=['GET', 'POST'])
@policy_required(PAGE_EDIT_POLICY)
def page_edit(slug=None):
    project, security = _project_and_security()
    if not security.can_edit_pages:
        raise AuthorizationError(f"Pages in {security.project_id} cannot be edited by this user")
    return render_template('content/edit.html', project=project, security=security, kind='page', slug=slug)


@content_bp.route('/api/rss')
@cache_profile('RssCacheProfile')
def rss():
    project, _security = _project_and_security()
    if project is None:
        abort(404)
    return Response(build_rss(project, _site_url()), mimetype='application/rss+xml')


@content_bp.route('/api/sitemap')
@cache_profile('SiteMapCacheProfile')
def sitemap():
    site_url = _site_url()
    return Response(build_sitemap([site_url + '/', site_url + '/blog']), mimetype='application/xml')
