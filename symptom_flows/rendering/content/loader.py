"""
Content text rendering.

Content blocks are turned into display text by Jinja2 templates kept next to
this module. Every name in `Template` is checked against the templates
directory at import, so a renamed or missing template stops the app at
startup rather than on the first render of the step that uses it.
"""

from functools import lru_cache
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

from .templates import Template

TEMPLATES_DIR = Path(__file__).parent / "templates"


def _check_templates_exist():
    for name in dir(Template):
        if name.startswith("_"):
            continue
        path = TEMPLATES_DIR / f"{getattr(Template, name)}.jinja2"
        if not path.exists():
            raise FileNotFoundError(f"Content template missing: {path}")


_check_templates_exist()


@lru_cache(maxsize=1)
def _environment() -> Environment:
    # Output is plain text for native widgets, never HTML.
    return Environment(
        loader=FileSystemLoader(TEMPLATES_DIR),
        autoescape=select_autoescape(default=False),
        trim_blocks=True,
        lstrip_blocks=True,
    )


def render(template_name: str, **values) -> str:
    """Renders the `template_name` content template with the given form-derived values."""
    return _environment().get_template(f"{template_name}.jinja2").render(**values)
