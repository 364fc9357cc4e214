"""
renderer.py

Responsibility: Render recipe templates and write the results.

Rules:
- Templates are Jinja2 files shipped in `bbgen/templates`.
- Undefined variables are errors, never silently empty.
- Every output is rendered in memory first; nothing is written until all
  renders succeed.

This module intentionally does NOT know about git, project files, or CLI parsing.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, StrictUndefined, TemplateError

TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"


class RenderError(RuntimeError):
    pass


@dataclass(frozen=True)
class RenderedFile:
    target: Path
    content: str


def bb_quote(value: Any) -> str:
    """Escape a value for a double-quoted BitBake assignment."""
    return str(value).replace("\\", "\\\\").replace('"', '\\"')


def _environment(templates_dir: Path) -> Environment:
    if not templates_dir.is_dir():
        raise RenderError(f"Template directory not found: {templates_dir}")
    env = Environment(
        loader=FileSystemLoader(str(templates_dir)),
        autoescape=False,
        undefined=StrictUndefined,
        keep_trailing_newline=True,
    )
    env.filters["bbquote"] = bb_quote
    return env


def render_files(
    jobs: list[tuple[str, Path]],
    *,
    context: dict[str, Any],
    templates_dir: str | Path = TEMPLATES_DIR,
) -> list[RenderedFile]:
    """
    Render each (template_name, target) pair with the same context.
    """
    env = _environment(Path(templates_dir))
    rendered: list[RenderedFile] = []
    for template_name, target in jobs:
        try:
            out = env.get_template(template_name).render(**context)
        except TemplateError as e:
            raise RenderError(f"Failed rendering template file: {template_name}") from e
        rendered.append(RenderedFile(target=Path(target), content=out))
    return rendered


def write_files(files: list[RenderedFile]) -> None:
    """
    Write the rendered files through sibling temp files.

    Targets are only replaced once every temp file is written, so a failed
    write leaves existing targets untouched. Failures surface as RenderError.
    """
    staged: list[tuple[Path, Path]] = []
    try:
        for f in files:
            f.target.parent.mkdir(parents=True, exist_ok=True)
            tmp = f.target.with_name(f".{f.target.name}.tmp")
            staged.append((tmp, f.target))
            # Normalize newlines for stable cross-platform output.
            tmp.write_text(f.content, encoding="utf-8", newline="\n")
        for tmp, target in staged:
            os.replace(tmp, target)
    except OSError as e:
        raise RenderError(f"Failed writing output file: {e}") from e
    finally:
        for tmp, _target in staged:
            tmp.unlink(missing_ok=True)
