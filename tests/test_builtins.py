import io
import os
from pathlib import Path

import pytest

from pyminishell.builtins import (
    Builtin,
    Shell,
    ShellExit,
    call_builtin,
    cd,
    echo,
    exit_shell,
    is_builtin,
    is_only_n,
    parse_exit_code,
    pwd,
)


@pytest.fixture
def shell(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    sh = Shell([f"HOME={tmp_path}", "A=1", f"PWD={tmp_path}"], cwd=str(tmp_path))
    sh.stderr = io.StringIO()
    return sh


@pytest.mark.parametrize(
    "arg, expected",
    [("-n", True), ("-nnn", True), ("-nx", False), ("", False), (None, False)],
)
def test_is_only_n(arg, expected):
    assert is_only_n(arg) is expected


@pytest.mark.parametrize(
    "args, expected",
    [
        (["echo", "a", "b"], "a b\n"),
        (["echo", "-n", "-nn", "x"], "x"),
        (["echo", "-nx", "y"], "-nx y\n"),
        (["echo", "-n", "-nx", "y"], "-nx y"),
        (["echo"], "\n"),
    ],
)
def test_echo(args, expected):
    out = io.StringIO()
    echo(args, out)
    assert out.getvalue() == expected


@pytest.mark.parametrize(
    "text, expected",
    [
        ("42", 42),
        (" -7 ", -7),
        ("abc", None),
        ("", None),
        ("+", None),
        ("12a", None),
        ("9223372036854775807", 2**63 - 1),
        ("9223372036854775808", None),
        ("-9223372036854775808", -(2**63)),
        ("--", 0),
    ],
)
def test_parse_exit_code(text, expected):
    assert parse_exit_code(text) == expected


@pytest.mark.parametrize("builtin", list(Builtin))
def test_is_builtin_names(builtin):
    assert is_builtin([builtin.value, "x"]) is builtin


def test_is_builtin_rejects_others():
    assert is_builtin(["ls"]) is None
    assert is_builtin([]) is None


def test_export_new_variable(shell):
    shell.export("B=2")
    assert shell.env.find("B") == "2"
    assert 'B="2"' in shell.exports.entries()


def test_export_changes_existing(shell):
    shell.export("A=3")
    assert shell.env.find("A") == "3"
    assert 'A="3"' in shell.exports.entries()


def test_export_append(shell):
    shell.export("A+=x")
    assert shell.env.find("A") == "1x"
    assert 'A="1x"' in shell.exports.entries()


def test_export_bare_name(shell):
    shell.export("C")
    assert "C" in shell.exports.entries()
    assert shell.env.find("C") is None


def test_export_invalid(shell):
    shell.export("1X=a")
    assert shell.status == 1
    assert "not a valid identifier" in shell.stderr.getvalue()
    assert shell.env.find("1X") is None


def test_unset(shell):
    shell.unset("A")
    assert shell.env.find("A") is None
    assert all(not entry.startswith("A=") for entry in shell.exports.entries())


def test_export_listing_is_sorted(shell):
    out = io.StringIO()
    call_builtin(shell, ["export"], Builtin.EXPORT, out)
    lines = out.getvalue().splitlines()
    assert 'declare -x A="1"' in lines
    assert lines == sorted(lines)
    assert all(line.startswith("declare -x ") for line in lines)


def test_env_listing(shell):
    out = io.StringIO()
    call_builtin(shell, ["env"], Builtin.ENV, out)
    assert out.getvalue().splitlines() == shell.env.entries()


def test_call_unset_and_export(shell):
    call_builtin(shell, ["export", "X=1", "Y=2"], Builtin.EXPORT)
    assert shell.env.find("Y") == "2"
    call_builtin(shell, ["unset", "X", "Y"], Builtin.UNSET)
    assert shell.env.find("X") is None
    assert shell.env.find("Y") is None


def test_pwd(shell, tmp_path):
    out = io.StringIO()
    pwd(shell, out)
    assert out.getvalue() == f"{tmp_path}\n"


def test_cd_into_and_back(shell, tmp_path):
    (tmp_path / "sub").mkdir()
    assert cd(shell, ["cd", "sub"]) == 0
    assert shell.cwd.path() == str(tmp_path / "sub")
    assert Path(os.getcwd()) == (tmp_path / "sub").resolve()
    assert shell.env.find("PWD") == str(tmp_path / "sub")
    assert shell.env.find("OLDPWD") == str(tmp_path)
    assert cd(shell, ["cd", ".."]) == 0
    assert shell.cwd.path() == str(tmp_path)
    assert Path(os.getcwd()) == tmp_path.resolve()


def test_cd_home(shell, tmp_path):
    (tmp_path / "sub").mkdir()
    cd(shell, ["cd", "sub"])
    assert cd(shell, ["cd"]) == 0
    assert shell.cwd.path() == str(tmp_path)
    assert Path(os.getcwd()) == tmp_path.resolve()


def test_cd_tilde_path(shell, tmp_path):
    (tmp_path / "sub").mkdir()
    assert cd(shell, ["cd", "~/sub"]) == 0
    assert shell.cwd.path() == str(tmp_path / "sub")


def test_cd_too_many(shell):
    assert cd(shell, ["cd", "a", "b"]) == 1
    assert "too many arguments" in shell.stderr.getvalue()


def test_cd_missing(shell, tmp_path):
    assert cd(shell, ["cd", "nowhere"]) == 1
    assert "No such file or directory" in shell.stderr.getvalue()
    assert shell.cwd.path() == str(tmp_path)


def test_cd_not_a_directory(shell, tmp_path):
    (tmp_path / "f").write_text("x")
    assert cd(shell, ["cd", "f"]) == 1
    assert "Not a directory" in shell.stderr.getvalue()


def test_cd_dot_is_noop(shell, tmp_path):
    assert cd(shell, ["cd", "."]) == 0
    assert shell.cwd.path() == str(tmp_path)


def test_exit_with_code(shell):
    out = io.StringIO()
    with pytest.raises(ShellExit) as info:
        exit_shell(shell, ["exit", "42"], out)
    assert info.value.status == 42
    assert out.getvalue() == "exit\n"


def test_exit_wraps_code(shell):
    with pytest.raises(ShellExit) as info:
        exit_shell(shell, ["exit", "300"], io.StringIO())
    assert info.value.status == 44


def test_exit_non_numeric(shell):
    with pytest.raises(ShellExit) as info:
        exit_shell(shell, ["exit", "abc"], io.StringIO())
    assert info.value.status == 2
    assert "numeric argument required" in shell.stderr.getvalue()


def test_exit_too_many(shell):
    exit_shell(shell, ["exit", "1", "2"], io.StringIO())
    assert shell.status == 1
    assert "too many arguments" in shell.stderr.getvalue()


def test_exit_uses_last_status(shell):
    shell.status = 5
    with pytest.raises(ShellExit) as info:
        call_builtin(shell, ["exit"], Builtin.EXIT, io.StringIO())
    assert info.value.status == 5