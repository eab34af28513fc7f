"""Shared Jinja environment for every HTML fragment the workbench renders."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, StrictUndefined

TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "templates"


@lru_cache(maxsize=1)
def template_environment() -> Environment:
    """Return the HTML environment. Values are autoescaped unless marked ``safe``."""
    return Environment(
        loader=FileSystemLoader(str(TEMPLATE_DIR)),
        autoescape=True,
        trim_blocks=True,
        lstrip_blocks=True,
        undefined=StrictUndefined,
    )


def render_template(name: str, **context: object) -> str:
    """Render ``name`` and strip surrounding whitespace."""
    return template_environment().get_template(name).render(**context).strip()
