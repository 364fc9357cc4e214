"""
bbgen package

This package generates BitBake recipes (meta-erlang `mix` class) for a project
from its build configuration and its git checkout.

Key responsibilities are split across modules:
- `project.py`: load `bbgen.yaml` into a structured configuration
- `vcs.py`: read-only git queries (origin remote, branch, HEAD revision)
- `sources.py`: remote URL normalization and private dependency fetch directives
- `licenses.py`: md5 entries for LIC_FILES_CHKSUM
- `renderer.py`: Jinja2 rendering of the recipe and include templates
- `cli.py`: CLI entrypoint and orchestration (load -> query git -> render -> write)
"""

from __future__ import annotations

__all__ = ["__version__"]

__version__ = "0.1.0"
