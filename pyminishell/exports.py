"""The list of exported variables shown by ``export`` without arguments."""

from __future__ import annotations

import sys
from collections.abc import Iterable, Iterator
from typing import TextIO


def format_export(var: str) -> str:
    """Render ``NAME=value`` as ``NAME="value"``; a bare ``NAME`` is kept as is."""
    name, eq, value = var.partition("=")
    if not eq:
        return var
    return f'{name}="{value}"'


def _key(var: str) -> str:
    name = var.partition("=")[0]
    return name[:-1] if name.endswith("+") else name


def _entry_name(entry: str) -> str:
    return entry.partition("=")[0]


class ExportList:
    """Sorted, quoted copy of the exported variables."""

    def __init__(self, entries: Iterable[str] = ()) -> None:
        self._vars: list[str] = [format_export(entry) for entry in sorted(entries)]

    def find(self, var: str | None) -> str | None:
        """The entry whose name matches the name in ``var``, or None."""
        if not var:
            return None
        key = _key(var)
        return next(
            (entry for entry in self._vars if _entry_name(entry) == key), None
        )

    def add(self, var: str | None) -> None:
        """Add a new entry and keep the list sorted."""
        if not var:
            return
        self._vars.append(format_export(var))
        self._vars.sort()

    def modify(self, var: str) -> None:
        """Set the value of existing entries, or append to it with ``NAME+=value``."""
        name, eq, _ = var.partition("=")
        if not eq:
            return
        if name.endswith("+"):
            self.append_value(var, name[:-1])
            return
        formatted = format_export(var)
        self._vars = [
            formatted if _entry_name(entry) == name else entry
            for entry in self._vars
        ]

    def append_value(self, var: str, name: str) -> None:
        """Append the value found after ``=`` in ``var`` to the entries called ``name``."""
        if not name or "=" not in var:
            return
        value = var.partition("=")[2]

        def extended(entry: str) -> str:
            if _entry_name(entry) != name:
                return entry
            if "=" not in entry:
                return f'{name}="{value}"'
            return f'{entry[:-1]}{value}"'

        self._vars = [extended(entry) for entry in self._vars]

    def unset(self, name: str | None) -> None:
        """Remove the first entry starting with ``name``."""
        if not name or "=" in name:
            return
        for index, entry in enumerate(self._vars):
            if entry.startswith(name):
                del self._vars[index]
                return

    def display(self, stream: TextIO | None = None) -> None:
        """Print every entry as ``declare -x ENTRY``."""
        out = stream if stream is not None else sys.stdout
        for entry in self._vars:
            print(f"declare -x {entry}", file=out)

    def entries(self) -> list[str]:
        """A copy of all entries in order."""
        return list(self._vars)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._vars))

    def __len__(self) -> int:
        return len(self._vars)