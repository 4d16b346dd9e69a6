"""
Plain-text summary of a harness run.
"""

from __future__ import annotations

from pathlib import Path

import jinja2

from .models import RunResult

CURRENT_DIR = Path(__file__).parent.parent


def _first_line(text: str) -> str:
    return text.splitlines()[0] if text else ""


def render_report(result: RunResult) -> str:
    """Render the per-suite and overall totals of a run."""
    jinja_env = jinja2.Environment(lstrip_blocks=True, trim_blocks=True)
    jinja_env.filters["first_line"] = _first_line
    template = jinja_env.from_string((CURRENT_DIR / "templates" / "report.txt.jinja2").read_text(encoding="utf-8"))
    return template.render(result=result)
