"""Page template slots and their loading.

A ``TemplateSet`` holds one compiled jinja2 template per fixed slot (header,
line, footer, page) plus the stylesheet text. Built-in defaults ship as
package data; any slot can be replaced by a file on disk.
"""

from __future__ import annotations

from dataclasses import dataclass
from importlib import resources
from pathlib import Path

import jinja2

from ..errors import TemplateError

TEMPLATE_PACKAGE = "statik"
TEMPLATE_DIRECTORY = "templates"
SLOT_FILENAMES = {
    "header": "header.html.j2",
    "line": "line.html.j2",
    "footer": "footer.html.j2",
    "page": "page.html.j2",
}
STYLESHEET_FILENAME = "style.css"


@dataclass(frozen=True)
class TemplateSet:
    """Compiled templates for each page fragment plus stylesheet source."""

    header: jinja2.Template
    line: jinja2.Template
    footer: jinja2.Template
    page: jinja2.Template
    stylesheet: str


def build_environment() -> jinja2.Environment:
    """Return the shared jinja2 environment (HTML autoescape, strict undefined)."""
    return jinja2.Environment(
        loader=jinja2.PackageLoader(TEMPLATE_PACKAGE, TEMPLATE_DIRECTORY),
        autoescape=True,
        undefined=jinja2.StrictUndefined,
        keep_trailing_newline=True,
    )


def _read_override(path: Path, slot: str) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise TemplateError(f"could not read {slot} template", path) from exc


def _load_slot(environment: jinja2.Environment, slot: str, override: Path | None) -> jinja2.Template:
    try:
        if override is None:
            return environment.get_template(SLOT_FILENAMES[slot])
        template = environment.from_string(_read_override(override, slot))
    except jinja2.TemplateSyntaxError as exc:
        raise TemplateError(f"could not parse {slot} template (line {exc.lineno}: {exc.message})", override) from exc
    template.name = slot
    return template


def default_stylesheet() -> str:
    return (resources.files(TEMPLATE_PACKAGE) / TEMPLATE_DIRECTORY / STYLESHEET_FILENAME).read_text(encoding="utf-8")


def load_templates(
    header: Path | None = None,
    line: Path | None = None,
    footer: Path | None = None,
    page: Path | None = None,
    style: Path | None = None,
) -> TemplateSet:
    """Compile every slot, using the given override files where provided.

    Raises ``TemplateError`` when an override cannot be read or any template
    fails to parse.
    """
    environment = build_environment()
    if style is None:
        stylesheet = default_stylesheet()
    else:
        try:
            stylesheet = style.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise TemplateError("could not read stylesheet", style) from exc
    return TemplateSet(
        header=_load_slot(environment, "header", header),
        line=_load_slot(environment, "line", line),
        footer=_load_slot(environment, "footer", footer),
        page=_load_slot(environment, "page", page),
        stylesheet=stylesheet,
    )


__all__ = [
    "SLOT_FILENAMES",
    "TemplateSet",
    "build_environment",
    "default_stylesheet",
    "load_templates",
]
