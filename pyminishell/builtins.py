"""The commands the shell runs itself: cd, pwd, echo, export, unset, env, exit."""

from __future__ import annotations

import os
import sys
from enum import Enum
from itertools import takewhile
from typing import TextIO

from pyminishell.cwd import WorkingDirectory
from pyminishell.environment import Environment, is_valid_env_var
from pyminishell.exports import ExportList

_WHITESPACE = " \t\n\v\f\r"
_DIGITS = "0123456789"
_MAX_NAME = 256


class Builtin(Enum):
    """The builtin commands, keyed by the name typed at the prompt."""

    CD = "cd"
    PRINT_WORKING_DIRECTORY = "pwd"
    PWD = PRINT_WORKING_DIRECTORY
    EXPORT = "export"
    UNSET = "unset"
    ENV = "env"
    ECHO = "echo"
    EXIT = "exit"


class ShellError(Exception):
    """An error reported by a builtin, with the status it leaves behind."""

    def __init__(self, message: str, subject: str, status: int = 1) -> None:
        super().__init__(message)
        self.message = message
        self.subject = subject
        self.status = status

    def __str__(self) -> str:
        return f"{self.subject}: {self.message}"


class ShellExit(Exception):
    """Raised by ``exit`` to leave the shell with ``status``."""

    def __init__(self, status: int) -> None:
        super().__init__(status)
        self.status = status


class Shell:
    """State shared by the builtins: environment, exports, directory, last status."""

    def __init__(self, environ: list[str] | None = None, cwd: str | None = None) -> None:
        if cwd is None:
            cwd = os.getcwd()
        if environ is None:
            environ = [f"{name}={value}" for name, value in os.environ.items()]
        self.env = Environment(environ, cwd)
        self.exports = ExportList(self.env.entries())
        self.cwd = WorkingDirectory(cwd, self.env.find("HOME"))
        self.status = 0
        self.stderr: TextIO | None = None

    def export(self, var: str | None) -> None:
        """Add or change a variable in both the environment and the export list."""
        if not var:
            return
        valid = is_valid_env_var(var)
        changed = self.env.add(var)
        if not changed and valid and self.exports.find(var) is None:
            self.exports.add(var)
        elif not valid:
            self.report("not a valid identifier", f"export: {var}", 1)
        else:
            self.exports.modify(var)

    def unset(self, name: str | None) -> None:
        """Remove ``name`` from the export list and the environment."""
        if not name:
            return
        self.exports.unset(name)
        self.env.unset(name)

    def report(self, message: str, subject: str, status: int) -> int:
        """Print an error, record ``status`` as the last status and return it."""
        error = ShellError(message, subject, status)
        out = self.stderr if self.stderr is not None else sys.stderr
        out.write(f"minishell: {error}\n")
        self.status = status
        return status


def is_only_n(arg: str | None) -> bool:
    """Tell whether everything after the first character of ``arg`` is ``n``."""
    return bool(arg) and set(arg[1:]) <= {"n"}


def parse_exit_code(text: str | None) -> int | None:
    """Parse the argument of ``exit`` as a 64-bit signed integer, or None."""
    if text is None:
        return None
    rest = text.lstrip(_WHITESPACE)
    negative = False
    if rest[:1] in ("+", "-"):
        negative = rest[0] == "-"
        rest = rest[1:]
    if not rest:
        return None
    if rest == "-":
        return 0
    digits = "".join(takewhile(lambda char: char in _DIGITS, rest))
    value = int(digits) if digits else 0
    if value > (2**63 if negative else 2**63 - 1):
        return None
    if rest[len(digits):].lstrip(_WHITESPACE):
        return None
    return -value if negative else value


def echo(args: list[str] | None, stream: TextIO | None = None) -> None:
    """Print the arguments separated by spaces; leading ``-n`` flags drop the newline."""
    if not args:
        return
    out = stream if stream is not None else sys.stdout
    rest = list(args[1:])
    flags = list(takewhile(lambda word: word.startswith("-n") and is_only_n(word), rest))
    text = " ".join(rest[len(flags):])
    out.write(text if flags else text + "\n")


def pwd(shell: Shell, stream: TextIO | None = None) -> None:
    """Print the logical current directory."""
    out = stream if stream is not None else sys.stdout
    path = shell.cwd.path()
    if path:
        out.write(f"{path}\n")


def _record_move(shell: Shell, old: str) -> None:
    shell.export(f"OLDPWD={old}")
    shell.export(f"PWD={shell.cwd.path()}")


def cd(shell: Shell, args: list[str]) -> int:
    """Change directory; returns 0 on success, the error status otherwise."""
    if len(args) > 2:
        return shell.report("too many arguments", "cd", 1)
    target = args[1] if len(args) > 1 else None
    if target:
        directory = target.partition("/")[0]
        if directory and os.path.exists(directory) and not os.path.isdir(directory):
            return shell.report("Not a directory", f"cd: {target}", 1)
    if target is None or target == "~":
        home = shell.cwd.home
        if home is None:
            return -1
        try:
            os.chdir(home)
        except OSError:
            return -1
        old = shell.cwd.path()
        shell.cwd.update(target)
        _record_move(shell, old)
        return 0
    return _change_to(shell, target)


def _change_to(shell: Shell, target: str) -> int:
    if len(target.encode("utf-8")) >= _MAX_NAME:
        return shell.report("File name too long", "cd", 1)
    if target in ("", "."):
        return 0
    if target.startswith("~"):
        target = (shell.cwd.home or "") + target[1:]
    old = shell.cwd.path()
    if target == "..":
        cut = old.rfind("/")
        parent = old[: cut + 1] if cut >= 0 else old
        try:
            os.chdir(parent)
        except OSError:
            shell.report("No such file or directory", f"cd: {target}", 1)
        else:
            shell.cwd.update(target)
    else:
        try:
            os.chdir(target)
        except OSError:
            return shell.report("No such file or directory", f"cd: {target}", 1)
        shell.cwd.update(target)
    _record_move(shell, old)
    return 0


def exit_shell(shell: Shell, args: list[str], stream: TextIO | None = None) -> None:
    """Print ``exit`` and raise ShellExit, unless given too many arguments."""
    out = stream if stream is not None else sys.stdout
    out.write("exit\n")
    if len(args) > 1:
        code = parse_exit_code(args[1])
        if code is None:
            shell.report("numeric argument required", f"exit: {args[1]}", 2)
            raise ShellExit(2)
        if len(args) == 2:
            raise ShellExit(code & 0xFF)
        shell.report("too many arguments", "exit", 1)
        return
    raise ShellExit(shell.status & 0xFF)


def is_builtin(argv: list[str] | None) -> Builtin | None:
    """The builtin named by ``argv[0]``, or None."""
    if not argv:
        return None
    try:
        return Builtin(argv[0])
    except ValueError:
        return None


def call_builtin(
    shell: Shell,
    argv: list[str] | None,
    builtin: Builtin | None,
    stream: TextIO | None = None,
) -> None:
    """Run ``builtin`` with the arguments in ``argv``."""
    if not argv or builtin is None:
        return
    if builtin is Builtin.CD:
        cd(shell, argv)
    elif builtin is Builtin.PRINT_WORKING_DIRECTORY:
        pwd(shell, stream)
    elif builtin is Builtin.ECHO:
        echo(argv, stream)
    elif builtin is Builtin.EXPORT:
        if len(argv) == 1:
            shell.exports.display(stream)
        else:
            for var in argv[1:]:
                shell.export(var)
    elif builtin is Builtin.ENV:
        shell.env.display(stream)
    elif builtin is Builtin.EXIT:
        exit_shell(shell, argv, stream)
    elif builtin is Builtin.UNSET:
        for name in argv[1:]:
            shell.unset(name)