"""The shell's environment variable store."""

from __future__ import annotations

import os
import re
import sys
from collections.abc import Iterable, Iterator
from typing import TextIO

from pyminishell.textutils import atoi

DEFAULT_PATH = "/usr/local/sbin:/usr/local/bin:/usr/sbin:/usr/bin:/sbin:/bin"

_VALID_VAR = re.compile(r"[A-Za-z][A-Za-z0-9_]*(?:\+?=.*)?", re.DOTALL)


def is_valid_env_var(var: str | None) -> bool:
    """Tell whether ``var`` is a lexically valid ``NAME``, ``NAME=v`` or ``NAME+=v``."""
    return bool(var) and _VALID_VAR.fullmatch(var) is not None


def _is_append(var: str) -> bool:
    name, eq, _ = var.partition("=")
    return bool(eq) and name.endswith("+")


def _name(var: str) -> str:
    name = var.partition("=")[0]
    return name[:-1] if name.endswith("+") else name


class Environment:
    """Ordered list of ``NAME=value`` entries."""

    def __init__(self, entries: Iterable[str] = (), cwd: str | None = None) -> None:
        self._vars: list[str] = []
        initial = list(entries)
        if not initial:
            initial = [
                f"PWD={cwd if cwd is not None else os.getcwd()}",
                "SHLVL=1",
                f"PATH={DEFAULT_PATH}",
            ]
        for entry in initial:
            if entry.startswith("SHLVL="):
                entry = f"SHLVL={atoi(entry[len('SHLVL='):]) + 1}"
            self._append(entry)

    def _append(self, var: str) -> None:
        if "=" not in var:
            return
        if _is_append(var):
            name, _, value = var.partition("=")
            var = f"{name[:-1]}={value}"
        self._vars.append(var)

    def _lookup(self, name: str) -> int | None:
        for index, entry in enumerate(self._vars):
            if entry.partition("=")[0] == name:
                return index
        return None

    def add(self, var: str) -> bool:
        """Add or change a variable; True when an existing one was changed."""
        if not is_valid_env_var(var):
            return False
        index = self._lookup(_name(var))
        if index is None:
            self._append(var)
            return False
        if _is_append(var):
            self.update(var)
        else:
            self._vars[index] = var
        return True

    def update(self, var: str) -> None:
        """Replace an existing variable, or append to its value with ``+=``."""
        index = self._lookup(_name(var))
        if index is None:
            return
        if _is_append(var):
            self._vars[index] += var.partition("=")[2]
        else:
            self._vars[index] = var

    def unset(self, name: str | None) -> None:
        """Remove the first variable called ``name``."""
        if not name:
            return
        prefix = name + "="
        for index, entry in enumerate(self._vars):
            if entry.startswith(prefix):
                del self._vars[index]
                return

    def find(self, name: str | None) -> str | None:
        """Value of the variable ``name``, or None."""
        if not name:
            return None
        prefix = name + "="
        for entry in self._vars:
            if entry.startswith(prefix):
                return entry[len(prefix):]
        return None

    def entries(self) -> list[str]:
        """A copy of all entries in order."""
        return list(self._vars)

    def display(self, stream: TextIO | None = None) -> None:
        """Print every entry on its own line."""
        out = stream if stream is not None else sys.stdout
        for entry in self._vars:
            print(entry, file=out)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._vars))

    def __len__(self) -> int:
        return len(self._vars)