"""Confinement of filesystem paths to a set of allowed roots.

Every filesystem-touching operation in the data layer checks its target
with :func:`assert_allowed_path` before reading. Paths are canonicalized
(symlinks followed, ``..`` collapsed) and compared segment by segment, so
``/data`` never admits ``/data2``.
"""

import logging
import os
from pathlib import Path
from typing import Iterable, Union

logger = logging.getLogger(__name__)

PathLike = Union[str, os.PathLike]


class PathTraversalError(ValueError):
    """Raised when a path resolves outside every allowed root."""

    def __init__(self, candidate_path: PathLike, allowed_roots: Iterable[PathLike]):
        self.candidate_path = str(candidate_path)
        self.allowed_roots = [str(root) for root in allowed_roots]
        super().__init__(
            f"Path {self.candidate_path!r} is outside the allowed roots {self.allowed_roots!r}"
        )


def _canonical(path: PathLike) -> Path:
    return Path(path).expanduser().resolve(strict=False)


def _is_within(candidate: Path, root: Path) -> bool:
    root_parts = root.parts
    return candidate.parts[: len(root_parts)] == root_parts


def is_allowed_path(candidate_path: PathLike, allowed_roots: Iterable[PathLike]) -> bool:
    """Return True if the canonical candidate equals or descends from any root."""
    candidate = _canonical(candidate_path)
    return any(_is_within(candidate, _canonical(root)) for root in allowed_roots)


def assert_allowed_path(candidate_path: PathLike, allowed_roots: Iterable[PathLike]) -> Path:
    """Return the canonical form of ``candidate_path`` if it is confined.

    Raises :class:`PathTraversalError` when the candidate escapes all of
    ``allowed_roots``, whether through ``..`` segments, a symlink, or an
    unrelated absolute path.
    """
    roots = list(allowed_roots)
    candidate = _canonical(candidate_path)
    for root in roots:
        if _is_within(candidate, _canonical(root)):
            return candidate
    logger.debug("Rejected path %s (allowed roots: %s)", candidate, roots)
    raise PathTraversalError(candidate_path, roots)
