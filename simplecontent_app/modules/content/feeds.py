"""RSS channel and sitemap documents for a content project."""

from __future__ import annotations

from email.utils import format_datetime
from datetime import datetime, timezone
from typing import Iterable, Optional
from xml.etree import ElementTree

from ...models import ProjectSettings

SITEMAP_NAMESPACE = "http://www.sitemaps.org/schemas/sitemap/0.9"


def _sub(parent, tag: str, text: Optional[str]):
    if text in (None, ""):
        return None
    element = ElementTree.SubElement(parent, tag)
    element.text = str(text)
    return element


def build_rss(project: ProjectSettings, site_url: str, now: Optional[datetime] = None) -> bytes:
    """RSS 2.0 channel built from the project settings (no items)."""

    now = now or datetime.now(timezone.utc)
    rss = ElementTree.Element("rss", version="2.0")
    channel = ElementTree.SubElement(rss, "channel")
    _sub(channel, "title", project.title or site_url)
    _sub(channel, "link", site_url)
    _sub(channel, "description", project.description or project.title)
    _sub(channel, "language", project.language_code)
    _sub(channel, "copyright", project.copyright_notice)
    _sub(channel, "managingEditor", project.managing_editor_email)
    _sub(channel, "webMaster", project.webmaster_email)
    _sub(channel, "ttl", project.channel_time_to_live)
    _sub(channel, "generator", "simplecontent_app")
    _sub(channel, "lastBuildDate", format_datetime(now))
    return ElementTree.tostring(rss, encoding="utf-8", xml_declaration=True)


def build_sitemap(urls: Iterable[str]) -> bytes:
    urlset = ElementTree.Element("urlset", xmlns=SITEMAP_NAMESPACE)
    for location in urls:
        url = ElementTree.SubElement(urlset, "url")
        _sub(url, "loc", location)
    return ElementTree.tostring(urlset, encoding="utf-8", xml_declaration=True)
