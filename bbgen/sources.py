"""
sources.py

Responsibility: Derive BitBake SRC_URI entries from git remotes.

Two pure transformations live here:
- `normalize_remote`: origin remote URL + branch -> the project's own SRC_URI
- `extract_fetch_directives`: resolved dependencies -> sorted fetch directives
  for the private (ssh) ones

Generated recipes must not carry credentials from CI checkouts, so every
authenticated remote is rewritten to key-based ssh.

This module intentionally does NOT run git or read project files.
"""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass
from typing import Iterable

from bbgen.project import Dependency

SERVICE_ACCOUNT = "git"
HTTP_SCHEMES = frozenset({"http", "https"})


class UnrecognizedUriFormatError(ValueError):
    pass


class MalformedDependencyUriError(ValueError):
    pass


class UriShape(enum.Enum):
    AUTHENTICATED = "authenticated"  # scheme://user@host/path
    BARE = "bare"  # scheme://host...
    SCP_LIKE = "scp_like"  # user@host:path


# Insertion order is match priority.
_SHAPE_PATTERNS: dict[UriShape, re.Pattern[str]] = {
    UriShape.AUTHENTICATED: re.compile(r"(?P<scheme>[^@]+)://(?P<username>[^@]+)@(?P<host>[^:/]+)/(?P<path>.+)"),
    UriShape.BARE: re.compile(r"(?P<scheme>[^@:/]+)://(?:[^@/]*@)?(?P<host>[^:]+)"),
    UriShape.SCP_LIKE: re.compile(r"(?P<username>[^@]+)@(?P<host>[^:]+):(?P<path>.+)"),
}

_PRIVATE_MARKER = re.compile(r"[^@/:]+@")


@dataclass(frozen=True)
class ParsedRemote:
    shape: UriShape
    host: str
    scheme: str = ""
    username: str = ""
    path: str = ""


@dataclass(frozen=True)
class NormalizedSource:
    uri: str

    def __str__(self) -> str:
        return self.uri


@dataclass(frozen=True)
class FetchDirective:
    """One SRC_URI entry (plus its SRCREV) for a private dependency."""

    name: str
    uri: str
    revision: str


def _match_shape(shape: UriShape, raw_url: str) -> ParsedRemote | None:
    m = _SHAPE_PATTERNS[shape].match(raw_url)
    if m is None:
        return None
    groups = m.groupdict()
    return ParsedRemote(
        shape=shape,
        host=groups["host"],
        scheme=groups.get("scheme") or "",
        username=groups.get("username") or "",
        path=groups.get("path") or "",
    )


def parse_remote(raw_url: str) -> ParsedRemote | None:
    """
    Match `raw_url` against the known remote shapes in priority order.

    Returns the first match, or None when no shape fits.
    """
    for shape in _SHAPE_PATTERNS:
        parsed = _match_shape(shape, raw_url)
        if parsed is not None:
            return parsed
    return None


def _ssh_uri(username: str, host: str, path: str) -> str:
    return f"git://{username}@{host}/{path};protocol=ssh;nobranch=1"


def normalize_remote(raw_url: str, branch: str) -> NormalizedSource:
    """
    Convert a git remote URL and branch into the project's SRC_URI.

    - https://user@host/path -> git://git@host/path;protocol=ssh;nobranch=1;branch=<b>
    - user@host:path         -> git://user@host/path;protocol=ssh;nobranch=1;branch=<b>
    - scheme://host/path     -> git://host/path;branch=<b>
    """
    branch = branch.strip()
    url = raw_url.strip()

    parsed = parse_remote(url)
    if parsed is None:
        raise UnrecognizedUriFormatError(f"Getting url for git repo failed: unrecognized remote {url!r}")

    if parsed.shape is UriShape.AUTHENTICATED:
        # CI runners check out over https with a token; everyone else uses ssh.
        if parsed.scheme.lower() in HTTP_SCHEMES:
            uri = _ssh_uri(SERVICE_ACCOUNT, parsed.host, parsed.path)
        else:
            uri = _ssh_uri(parsed.username, parsed.host, parsed.path)
    elif parsed.shape is UriShape.SCP_LIKE:
        uri = _ssh_uri(parsed.username, parsed.host, parsed.path)
    else:
        # The pattern drops any userinfo; a port ends the host token.
        uri = f"git://{parsed.host.strip()}"

    return NormalizedSource(uri=f"{uri};branch={branch}")


def is_private_remote(remote_url: str) -> bool:
    return _PRIVATE_MARKER.match(remote_url) is not None


def extract_fetch_directives(deps: Iterable[Dependency]) -> list[FetchDirective]:
    """
    Build fetch directives for the git dependencies fetched over ssh.

    Public dependencies are skipped. The result is sorted by name so repeated
    runs produce identical recipes.
    """
    private = [d for d in deps if d.scm == "git" and is_private_remote(d.remote_url)]

    directives: list[FetchDirective] = []
    for dep in sorted(private, key=lambda d: d.name):
        parsed = _match_shape(UriShape.SCP_LIKE, dep.remote_url)
        if parsed is None:
            raise MalformedDependencyUriError(f"Dependency {dep.name!r} has a malformed git uri: {dep.remote_url!r}")
        uri = _ssh_uri(parsed.username, parsed.host, parsed.path)
        directives.append(
            FetchDirective(
                name=dep.name,
                uri=f"{uri};name={dep.name};destsuffix={dep.name}",
                revision=dep.revision,
            )
        )
    return directives
