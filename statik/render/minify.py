"""HTML minification with embedded CSS/JS minified under their own rules."""

from __future__ import annotations

from pathlib import Path

import minify_html

from ..errors import MinifyError


def minify_markup(markup: str, path: Path | None = None) -> str:
    """Return minified ``markup``; ``path`` only labels the error."""
    try:
        return minify_html.minify(
            markup,
            minify_css=True,
            minify_js=True,
            keep_closing_tags=True,
            keep_html_and_head_opening_tags=True,
        )
    except Exception as exc:
        raise MinifyError(f"could not minify page ({exc})", path) from exc


__all__ = ["minify_markup"]
