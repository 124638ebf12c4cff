# File: simplecontent_app/models/content.py
# Content project settings, bound from simplecontent-settings.json.

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class ProjectSettings:
    project_id: str = ""
    title: str = ""
    description: str = ""
    copyright_notice: str = ""
    publisher_email: str = ""
    managing_editor_email: str = ""
    webmaster_email: str = ""
    channel_time_to_live: int = 60
    language_code: str = "en-US"
    default_page_slug: str = "home"
    posts_per_page: int = 5


@dataclass
class ProjectSecurityResult:
    """What the current user may do in a content project."""

    display_name: str = ""
    project_id: str = ""
    is_authenticated: bool = False
    can_edit_posts: bool = False
    can_edit_pages: bool = False
