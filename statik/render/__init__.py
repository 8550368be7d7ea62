"""Listing-page rendering: template slots, payload building, and minification."""

from __future__ import annotations

from .minify import minify_markup
from .page import (
    INDEX_FILENAME,
    Crumb,
    FooterData,
    HeaderData,
    LineData,
    breadcrumbs,
    listing_lines,
    render_page,
    render_tree,
    write_page,
)
from .templates import TemplateSet, load_templates

__all__ = [
    "minify_markup",
    "INDEX_FILENAME",
    "Crumb",
    "FooterData",
    "HeaderData",
    "LineData",
    "breadcrumbs",
    "listing_lines",
    "render_page",
    "render_tree",
    "write_page",
    "TemplateSet",
    "load_templates",
]
