"""
project.py

Responsibility: Load the project's build configuration into a typed model.

The configuration lives in `bbgen.yaml` at the project root:

    app: my_app
    version: 1.2.0
    description: Does things
    homepage_url: https://example.com/my_app
    package:
      licenses: [Apache-2.0]
    deps:
      - name: libfoo
        git: git@git.example.com:org/libfoo
        lock: [git, "git@git.example.com:org/libfoo", abc123]

Everything downstream (assigns, templates) reads from `Project`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

PROJECT_FILE = "bbgen.yaml"


class ProjectError(ValueError):
    pass


class MissingLicenseError(ProjectError):
    pass


class EmptyLicenseListError(ProjectError):
    pass


@dataclass(frozen=True)
class Dependency:
    """A resolved dependency as recorded in the project's lock data."""

    name: str
    scm: str = "hex"
    remote_url: str = ""
    lock: tuple[Any, ...] = ()

    @property
    def revision(self) -> str:
        # Lock records are (scm, url, revision, ...).
        if len(self.lock) < 3:
            raise ProjectError(f"Dependency {self.name!r} has no locked revision")
        return str(self.lock[2])


@dataclass(frozen=True)
class Project:
    """Parsed project configuration."""

    app: str
    version: str
    description: str = ""
    homepage_url: str = ""
    licenses: tuple[str, ...] | None = None
    deps: tuple[Dependency, ...] = field(default_factory=tuple)

    @property
    def name(self) -> str:
        return dashify(self.app)

    @property
    def license(self) -> str:
        """
        The recipe LICENSE: the first declared license.

        A missing list and an empty list are distinct errors.
        """
        if self.licenses is None:
            raise MissingLicenseError(
                f"Could not find license for {self.app!r}, please make sure that one license has been added"
            )
        if not self.licenses:
            raise EmptyLicenseListError("The license can not be an empty list")
        return self.licenses[0]


def dashify(token: str) -> str:
    return str(token).replace("_", "-")


def _parse_dependency(raw: Any, index: int) -> Dependency:
    if not isinstance(raw, dict):
        raise ProjectError(f"`deps[{index}]` must be an object/mapping.")

    name = str(raw.get("name") or "").strip()
    if not name:
        raise ProjectError(f"`deps[{index}]` must define `name`.")

    remote_url = str(raw.get("git") or "").strip()
    scm = str(raw.get("scm") or ("git" if remote_url else "hex")).strip()

    lock_raw = raw.get("lock") or []
    if not isinstance(lock_raw, list):
        raise ProjectError(f"`deps[{index}].lock` must be a list when provided.")

    return Dependency(name=name, scm=scm, remote_url=remote_url, lock=tuple(lock_raw))


def _parse_licenses(data: dict[str, Any]) -> tuple[str, ...] | None:
    package = data.get("package") or {}
    if not isinstance(package, dict):
        raise ProjectError("`package` must be an object/mapping when provided.")
    licenses = package.get("licenses")
    if licenses is None:
        return None
    if isinstance(licenses, str):
        licenses = [licenses]
    if not isinstance(licenses, list):
        raise ProjectError("`package.licenses` must be a list.")
    return tuple(str(x) for x in licenses)


def parse_project(data: dict[str, Any]) -> Project:
    """
    Build a `Project` from an already-loaded configuration mapping.

    Required keys: `app`, `version`. License checks are deferred to
    `Project.license` so a project without one still loads.
    """
    app = str(data.get("app") or "").strip()
    if not app:
        raise ProjectError("Project must define `app`.")
    version = str(data.get("version") or "").strip()
    if not version:
        raise ProjectError("Project must define `version`.")

    deps_raw = data.get("deps") or []
    if not isinstance(deps_raw, list):
        raise ProjectError("`deps` must be a list when provided.")

    return Project(
        app=app,
        version=version,
        description=str(data.get("description") or ""),
        homepage_url=str(data.get("homepage_url") or ""),
        licenses=_parse_licenses(data),
        deps=tuple(_parse_dependency(d, i) for i, d in enumerate(deps_raw)),
    )


def load_project(project_dir: str | Path) -> Project:
    path = Path(project_dir) / PROJECT_FILE
    if not path.is_file():
        raise ProjectError(f"Could not find {PROJECT_FILE} in {Path(project_dir).resolve()}")

    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ProjectError(f"Could not read {path}: {e}") from e

    try:
        data = yaml.safe_load(text) or {}
    except yaml.YAMLError as e:
        raise ProjectError(f"Invalid YAML in {path}: {e}") from e
    if not isinstance(data, dict):
        raise ProjectError(f"{PROJECT_FILE} must be a mapping/object at the top level.")
    return parse_project(data)
