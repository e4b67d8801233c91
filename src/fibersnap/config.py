"""Snapshot configuration.

fibersnap.config
~~~~~~~~~~~~~~~~

Exclusion sets name the framework-internal units of two meta-frameworks
(a server-rendering framework and a file-route framework). Nodes whose
declared name is in either set never appear in a snapshot tree, although
their descendants do.

Settings can be overridden from the environment through
:meth:`SnapshotConfig.from_env`:

``FIBERSNAP_TAG_PREFIX``
    Prefix of the tags attached to rendered handles.
``FIBERSNAP_MAX_HOOK_ENTRIES``
    Upper bound on hook chain entries walked per node.
``FIBERSNAP_MAX_FORMAT_DEPTH``
    Nesting depth kept when formatting props and context.
``FIBERSNAP_EXTRA_EXCLUSIONS``
    Comma separated names added to both exclusion sets.
"""

from __future__ import annotations

import dataclasses
import logging
import os
import typing as t

from .constants import MAX_FORMAT_DEPTH, MAX_HOOK_ENTRIES, TAG_ID_PREFIX

if t.TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from typing_extensions import Self

logger = logging.getLogger(__name__)


#: Units the server-rendering framework mounts around every application
NEXTJS_DEFAULT_COMPONENTS: frozenset[str] = frozenset(
    {
        "ReactDevOverlay",
        "Portal",
        "HotReload",
        "ErrorBoundaryHandler",
        "AppRouter",
        "ErrorBoundary",
        "InnerLayoutRouter",
        "OuterLayoutRouter",
        "RedirectBoundary",
        "RedirectErrorBoundary",
        "NotFoundBoundary",
        "NotFoundErrorBoundary",
        "LoadingBoundary",
        "ScrollAndFocusHandler",
        "InnerScrollAndFocusHandler",
        "RenderFromTemplateContext",
        "DevRootNotFoundBoundary",
        "HistoryUpdater",
        "ServerRoot",
        "RSCComponent",
        "Head",
        "AppContainer",
        "Container",
        "PathnameContextProviderAdapter",
    },
)

#: Units the file-route framework mounts around every application
REMIX_DEFAULT_COMPONENTS: frozenset[str] = frozenset(
    {
        "RemixBrowser",
        "RemixErrorBoundary",
        "RemixRoute",
        "RemixRouteError",
        "RemixRootDefaultErrorBoundary",
        "Outlet",
        "Links",
        "Meta",
        "Scripts",
        "ScrollRestoration",
        "LiveReload",
        "DataRoutes",
        "RouterProvider",
    },
)


def _env_int(environ: Mapping[str, str], name: str, default: int) -> int:
    raw = environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Ignoring non-integer %s=%r", name, raw)
        return default
    if value < 1:
        logger.warning("Ignoring non-positive %s=%r", name, raw)
        return default
    return value


def _env_names(environ: Mapping[str, str], name: str) -> frozenset[str]:
    raw = environ.get(name, "")
    return frozenset(part.strip() for part in raw.split(",") if part.strip())


@dataclasses.dataclass(frozen=True)
class SnapshotConfig:
    """Settings consulted by :class:`fibersnap.builder.SnapshotBuilder`.

    Examples
    --------
    >>> config = SnapshotConfig()
    >>> config.is_excluded("AppRouter")
    True
    >>> config.is_excluded("Board")
    False
    >>> config.with_exclusions(["Board"]).is_excluded("Board")
    True
    """

    nextjs_default_components: frozenset[str] = NEXTJS_DEFAULT_COMPONENTS
    remix_default_components: frozenset[str] = REMIX_DEFAULT_COMPONENTS
    tag_prefix: str = TAG_ID_PREFIX
    max_hook_entries: int = MAX_HOOK_ENTRIES
    max_format_depth: int = MAX_FORMAT_DEPTH

    def is_excluded(self, name: str) -> bool:
        """Return True if *name* is a framework-internal unit of either set."""
        return (
            name in self.nextjs_default_components
            or name in self.remix_default_components
        )

    def with_exclusions(self, names: Iterable[str]) -> Self:
        """Return a copy with *names* added to both exclusion sets."""
        extra = frozenset(names)
        return dataclasses.replace(
            self,
            nextjs_default_components=self.nextjs_default_components | extra,
            remix_default_components=self.remix_default_components | extra,
        )

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> SnapshotConfig:
        """Build a config from ``FIBERSNAP_*`` environment variables.

        Parameters
        ----------
        environ : Mapping[str, str], optional
            Variables to read instead of :data:`os.environ`

        Examples
        --------
        >>> config = SnapshotConfig.from_env(
        ...     {"FIBERSNAP_TAG_PREFIX": "snap", "FIBERSNAP_MAX_HOOK_ENTRIES": "5"}
        ... )
        >>> config.tag_prefix, config.max_hook_entries
        ('snap', 5)
        """
        env = os.environ if environ is None else environ
        config = cls(
            tag_prefix=env.get("FIBERSNAP_TAG_PREFIX") or TAG_ID_PREFIX,
            max_hook_entries=_env_int(
                env,
                "FIBERSNAP_MAX_HOOK_ENTRIES",
                MAX_HOOK_ENTRIES,
            ),
            max_format_depth=_env_int(
                env,
                "FIBERSNAP_MAX_FORMAT_DEPTH",
                MAX_FORMAT_DEPTH,
            ),
        )
        extra = _env_names(env, "FIBERSNAP_EXTRA_EXCLUSIONS")
        if extra:
            config = config.with_exclusions(extra)
        return config
