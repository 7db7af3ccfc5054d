"""Dependency token parsing and CPM directive generation.

Users type dependencies in whatever notation is at hand: a bare package name
(``spdlog``), a pinned name (``spdlog@1.14.1``), a GitHub shorthand
(``google/googletest@v1.14.0``) or a full Git URL with an optional tag.  This
module turns each token into a single ``CPMAddPackage(...)`` line that the
generated ``CMakeLists.txt`` inlines verbatim.

Parsing never fails: anything that is not recognisably a URL or an
``org/repo`` pair is passed through as a shorthand and left for CPM to
resolve.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType


# ---------------------------------------------------------------------------
# Well-known packages
# ---------------------------------------------------------------------------

KNOWN_PACKAGES: MappingProxyType[str, str] = MappingProxyType({
    "spdlog": "gabime/spdlog",
    "nlohmann/json": "nlohmann/json",
    "curl": "curl/curl",
    "yaml-cpp": "jbeder/yaml-cpp",
    "googletest": "google/googletest",
    "asio": "chriskohlhoff/asio",
    "websocketpp": "zaphoyd/websocketpp",
    "concurrentqueue": "cameron314/concurrentqueue",
})

URL_PREFIXES: tuple[str, ...] = ("http://", "https://", "git@")


# ---------------------------------------------------------------------------
# Parsed representation
# ---------------------------------------------------------------------------


class DependencySource(str, Enum):
    """How CPM should locate a dependency."""

    URL = "url"
    SHORTHAND = "shorthand"


@dataclass(frozen=True)
class Dependency:
    """One parsed dependency token.

    ``location`` is the Git URL for :attr:`DependencySource.URL` and the
    ``org/repo`` (or unresolved bare name) for shorthand entries.
    """

    source: DependencySource
    name: str
    location: str
    tag: str | None = None

    @property
    def directive(self) -> str:
        """The ``CPMAddPackage`` statement for this dependency."""
        if self.source is DependencySource.URL:
            parts = [f'"NAME {self.name}"', f'GIT_REPOSITORY "{self.location}"']
            if self.tag is not None:
                parts.append(f'GIT_TAG "{self.tag}"')
            return f"CPMAddPackage({' '.join(parts)})"
        pinned = self.location if self.tag is None else f"{self.location}@{self.tag}"
        return f'CPMAddPackage("gh:{pinned}")'


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def parse_dependency(token: str) -> Dependency | None:
    """Parse a single dependency token.

    Returns ``None`` for blank tokens.  Only the first ``@`` separates the
    head from the tag; the remainder is taken verbatim as the tag, so
    ``git@host:org/repo.git`` style tokens are read with ``git`` as the head.
    """
    token = token.strip()
    if not token:
        return None

    head, sep, tag = token.partition("@")
    version = tag if sep else None

    if head.startswith(URL_PREFIXES):
        return Dependency(
            source=DependencySource.URL,
            name=_repo_name_from_url(head),
            location=head,
            tag=version,
        )
    if "/" in head:
        return Dependency(
            source=DependencySource.SHORTHAND,
            name=head.rsplit("/", 1)[-1],
            location=head,
            tag=version,
        )
    return Dependency(
        source=DependencySource.SHORTHAND,
        name=head,
        location=KNOWN_PACKAGES.get(head, head),
        tag=version,
    )


def parse_dependencies(tokens: Iterable[str]) -> list[Dependency]:
    """Parse every non-blank token, preserving input order."""
    parsed = (parse_dependency(token) for token in tokens)
    return [dep for dep in parsed if dep is not None]


def normalize(tokens: Iterable[str]) -> list[str]:
    """Turn raw dependency tokens into ``CPMAddPackage`` directives.

    Blank and whitespace-only tokens produce no directive; every other token
    produces exactly one, in input order.

    Examples::

        normalize(["spdlog@1.14.1"])
        -> ['CPMAddPackage("gh:gabime/spdlog@1.14.1")']

        normalize(["https://github.com/foo/bar.git@v1.0"])
        -> ['CPMAddPackage("NAME bar" GIT_REPOSITORY '
            '"https://github.com/foo/bar.git" GIT_TAG "v1.0")']
    """
    return [dep.directive for dep in parse_dependencies(tokens)]


def split_dependency_list(text: str | Sequence[str] | None) -> list[str]:
    """Split the comma-separated dependency field into trimmed tokens.

    A list is accepted as well (each entry trimmed); blank entries are
    dropped in both cases.
    """
    if not text:
        return []
    items = text.split(",") if isinstance(text, str) else list(text)
    return [item.strip() for item in items if item and item.strip()]


def render_dependency_section(directives: Sequence[str]) -> str:
    """Return the ``# Dependencies`` CMake block, or ``""`` when empty."""
    if not directives:
        return ""
    return "# Dependencies\n" + "\n".join(directives) + "\n"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _repo_name_from_url(url: str) -> str:
    """Derive a display name from the last path segment of a Git URL."""
    last = url.rstrip("/").rsplit("/", 1)[-1]
    if last.endswith(".git"):
        last = last[: -len(".git")]
    return last
