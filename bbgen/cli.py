"""
cli.py

Responsibility: CLI entrypoint for bbgen.

High-level flow (single command, run from the project root):
1) Load `bbgen.yaml` -> `Project`
2) Ask git for the origin remote, branch and HEAD revision
3) Build the assigns (SRC_URI, dependency directives, license digests, ...)
4) Render `<name>_<version>.bb` and `<name>-<version>.inc`, then write both

This module should orchestrate behavior but keep concerns isolated:
- Project configuration: `project.py`
- Git queries: `vcs.py`
- SRC_URI derivation: `sources.py`
- License digests: `licenses.py`
- Rendering: `renderer.py`
"""

from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path

from loguru import logger

from bbgen import __version__
from bbgen.licenses import LicenseFileError, collect_license_files
from bbgen.project import Project, ProjectError, load_project
from bbgen.renderer import TEMPLATES_DIR, RenderError, render_files, write_files
from bbgen.sources import MalformedDependencyUriError, UnrecognizedUriFormatError, extract_fetch_directives, normalize_remote
from bbgen.vcs import GitClient, GitError, VersionControl

RECIPE_TEMPLATE = "bitbake.bb.j2"
INCLUDE_TEMPLATE = "bitbake-inc.inc.j2"

FATAL_ERRORS = (
    ProjectError,
    GitError,
    UnrecognizedUriFormatError,
    MalformedDependencyUriError,
    LicenseFileError,
    RenderError,
)


def recipe_filename(project_dir: Path, project: Project) -> Path:
    return project_dir / f"{project.name}_{project.version}.bb"


def include_filename(project_dir: Path, project: Project) -> Path:
    return project_dir / f"{project.name}-{project.version}.inc"


def build_assigns(project_dir: Path, project: Project, vcs: VersionControl) -> dict[str, object]:
    # Deterministic keys; templates should reference these.
    remote_url = vcs.current_remote_url()
    branch = vcs.current_branch()
    src_uri = normalize_remote(remote_url, branch)
    logger.debug("SRC_URI for {} on {}: {}", remote_url, branch, src_uri)

    return {
        "mix_bitbake_ver": __version__,
        "name": project.name,
        "summary": project.description,
        "license": project.license,
        "homepage": project.homepage_url,
        "project_src_uri": src_uri.uri,
        "project_src_rev": vcs.current_revision(),
        "lic_files": collect_license_files(project_dir),
        "deps": extract_fetch_directives(project.deps),
    }


def generate(
    project_dir: str | Path,
    *,
    vcs: VersionControl | None = None,
    templates_dir: str | Path = TEMPLATES_DIR,
) -> list[Path]:
    """
    Generate the recipe and include file for the project in project_dir.

    Both files are rendered before either is written, so a failure before
    the write step leaves no output behind. Writes go through temp files;
    see `write_files`. Returns the written paths.
    """
    root = Path(project_dir).resolve()
    project = load_project(root)
    assigns = build_assigns(root, project, vcs or GitClient(root))

    rendered = render_files(
        [
            (RECIPE_TEMPLATE, recipe_filename(root, project)),
            (INCLUDE_TEMPLATE, include_filename(root, project)),
        ],
        context=assigns,
        templates_dir=templates_dir,
    )
    write_files(rendered)

    written = [f.target for f in rendered]
    for target in written:
        logger.info("* Wrote {}", target)
    return written


def _setup_logging() -> None:
    logger.remove()
    logger.add(
        sys.stderr,
        format="{level:<8} | {message}",
        level=os.environ.get("BBGEN_LOG_LEVEL", "INFO").upper(),
    )


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="bbgen",
        description="Generate BitBake recipes for the project in the current directory",
    )
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return p


def main(argv: list[str] | None = None) -> int:
    _build_parser().parse_args(argv)
    _setup_logging()
    try:
        generate(Path.cwd())
    except FATAL_ERRORS as e:
        logger.error("{}", e)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
