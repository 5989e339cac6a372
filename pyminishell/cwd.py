"""Logical tracking of the current working directory."""

from __future__ import annotations

import re

_SEGMENT = re.compile(r"[^/]*//?|[^/]+\Z")


def split_cwd(path: str | None) -> list[str]:
    """Cut ``path`` into segments, each ending with its slash (``//`` kept together)."""
    if not path:
        return []
    return _SEGMENT.findall(path)


def count_dir(path: str | None) -> int:
    """Number of segments in ``path``."""
    return len(split_cwd(path))


def join_segments(segments: list[str]) -> str:
    """Assemble segments into a path, dropping the trailing slash of the last one."""
    if not segments:
        return ""
    *head, last = segments
    if not last.startswith("/"):
        last = last.partition("/")[0]
    return "".join(head) + last


class WorkingDirectory:
    """The current directory kept as a list of path segments."""

    def __init__(self, path: str | None, home: str | None = None) -> None:
        self.home = home
        self._segments: list[str] = []
        self.reset(path)

    def _add(self, segment: str) -> None:
        if self._segments and not self._segments[-1].endswith("/"):
            self._segments[-1] += "/"
        self._segments.append(segment)

    def _drop_last(self) -> None:
        if len(self._segments) >= 2:
            self._segments.pop()

    def reset(self, path: str | None) -> None:
        """Start over from the absolute ``path``."""
        self._segments = []
        for segment in split_cwd(path):
            self._add(segment)

    def update(self, new_dir: str | None) -> None:
        """Follow a ``cd`` to ``new_dir``, resolving ``..`` logically."""
        if new_dir is None or new_dir == "~":
            self.reset(self.home)
        elif new_dir.startswith("/"):
            if new_dir == "/.":
                self.reset("/")
            else:
                self.reset(new_dir)
        else:
            for segment in split_cwd(new_dir):
                if segment.startswith(".."):
                    self._drop_last()
                else:
                    self._add(segment)

    def path(self) -> str:
        """The current directory as a string."""
        return join_segments(self._segments)

    def __str__(self) -> str:
        return self.path()