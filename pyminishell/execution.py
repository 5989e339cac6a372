"""Running a pipeline of commands."""

from __future__ import annotations

import copy
import io
import os
import subprocess
import sys
import threading
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import TextIO, Union

from pyminishell.builtins import (
    Builtin,
    Shell,
    ShellExit,
    call_builtin,
    is_builtin,
)

_Process = Union[subprocess.Popen, int, None]


@dataclass
class Command:
    """One stage of a pipeline as produced by the parser."""

    argv: list[str] = field(default_factory=list)
    path: str | None = None
    stdin: int | None = None
    stdout: int | None = None
    error: str | None = None
    error_code: int = 0


def _environment(shell: Shell) -> dict[str, str]:
    pairs = (entry.partition("=") for entry in shell.env.entries())
    return {name: value for name, _, value in pairs}


def _write_all(fd: int, data: bytes) -> None:
    try:
        view = memoryview(data)
        while view:
            view = view[os.write(fd, view):]
    except BrokenPipeError:
        pass
    finally:
        os.close(fd)


def _emit(text: str, fd: int | None, writers: list[threading.Thread]) -> None:
    if fd is None:
        sys.stdout.write(text)
        sys.stdout.flush()
        return
    writer = threading.Thread(
        target=_write_all, args=(os.dup(fd), text.encode("utf-8")), daemon=True
    )
    writer.start()
    writers.append(writer)


def _run_builtin(shell: Shell, argv: list[str], builtin: Builtin) -> tuple[str, int]:
    """Run a builtin as a pipeline stage, without touching the shell's own state."""
    child = copy.copy(shell)
    child.env = copy.deepcopy(shell.env)
    child.exports = copy.deepcopy(shell.exports)
    child.cwd = copy.deepcopy(shell.cwd)
    out = io.StringIO()
    saved = os.getcwd()
    try:
        call_builtin(child, argv, builtin, out)
        code = 0
    except ShellExit as exc:
        code = exc.status
    finally:
        if os.getcwd() != saved:
            os.chdir(saved)
    return out.getvalue(), code


def _launch(
    shell: Shell,
    command: Command,
    stdin: int | None,
    stdout: int | None,
    writers: list[threading.Thread],
) -> _Process:
    if not command.argv:
        return None
    builtin = is_builtin(command.argv)
    if builtin is not None:
        text, code = _run_builtin(shell, command.argv, builtin)
        _emit(text, stdout, writers)
        return code
    if command.path is None:
        return 1
    try:
        return subprocess.Popen(
            command.argv,
            executable=command.path,
            stdin=stdin,
            stdout=stdout,
            env=_environment(shell),
        )
    except OSError:
        return 1


def _is_local(command: Command) -> bool:
    return bool(command.argv) and command.argv[0].startswith("./")


def execute(shell: Shell, commands: Iterable[Command]) -> bool:
    """Run the pipeline; False when a pipe could not be created."""
    stages = list(commands)
    if not stages:
        return True
    if len(stages) == 1:
        builtin = is_builtin(stages[0].argv)
        if builtin is not None and builtin not in (Builtin.ECHO, Builtin.ENV):
            call_builtin(shell, stages[0].argv, builtin)
            return True
    processes: list[_Process] = []
    writers: list[threading.Thread] = []
    source: int | None = None
    try:
        for index, command in enumerate(stages):
            read_fd = write_fd = None
            if index < len(stages) - 1:
                try:
                    read_fd, write_fd = os.pipe()
                except OSError as exc:
                    sys.stderr.write(exc.strerror or str(exc))
                    return False
            stdin = command.stdin if command.stdin is not None else source
            stdout = command.stdout if command.stdout is not None else write_fd
            process = _launch(shell, command, stdin, stdout, writers)
            processes.append(process)
            if write_fd is not None:
                os.close(write_fd)
            if source is not None:
                os.close(source)
            source = read_fd
            if _is_local(command) and isinstance(process, subprocess.Popen):
                code = process.wait()
                if code >= 0:
                    shell.status = command.error_code or code
    finally:
        if source is not None:
            os.close(source)
    wait_for_children(shell, stages, processes)
    for writer in writers:
        writer.join()
    display_errors(stages)
    return True


def wait_for_children(
    shell: Shell, commands: Sequence[Command], processes: Sequence[_Process]
) -> None:
    """Wait for every stage; the last one sets the shell's status."""
    commands = list(commands)
    last = len(commands) - 1
    for index, (command, process) in enumerate(zip(commands, processes)):
        if process is None or not command.argv or _is_local(command):
            continue
        code = process.wait() if isinstance(process, subprocess.Popen) else process
        if code >= 0 and index == last:
            shell.status = command.error_code or code


def display_errors(commands: Iterable[Command], stream: TextIO | None = None) -> None:
    """Write out the error message recorded for each command."""
    out = stream if stream is not None else sys.stderr
    for command in commands:
        if command.error:
            out.write(command.error)