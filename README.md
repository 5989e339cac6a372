# pyminishell

The core of a small POSIX-style shell, usable as a library.

## Modules

- `pyminishell.textutils`: byte-oriented string helpers: `atoi`, `split`
  (drops empty pieces), `strtrim`, `strnstr` (returns an index or `None`),
  `strncmp` and `strcmp` (return the difference of the first differing bytes).
- `pyminishell.environment`: `Environment`, an ordered store of `NAME=value`
  entries, and `is_valid_env_var`. An empty initial list is replaced by `PWD`,
  `SHLVL=1` and a default `PATH`; an inherited `SHLVL` is incremented by one.
  `add` handles `NAME=value` and `NAME+=value` (append).
- `pyminishell.exports`: `ExportList`, the sorted list shown by `export` with
  no arguments (`declare -x NAME="value"`), and `format_export`.
- `pyminishell.cwd`: `WorkingDirectory`, a logical current directory that
  follows `cd` arguments such as `..` without resolving symlinks, plus
  `split_cwd`, `count_dir` and `join_segments`.
- `pyminishell.builtins`: the `Shell` state (environment, export list,
  working directory, last status) and the builtins `echo`, `pwd`, `cd` and
  `exit_shell`, dispatched by `call_builtin` after `is_builtin` has looked up
  the `Builtin` member for `argv[0]`. Errors are written to standard error as
  `minishell: subject: message` by `Shell.report`, which also records the
  status. `exit` raises `ShellExit` carrying the status modulo 256;
  `parse_exit_code` accepts a 64-bit signed integer surrounded by whitespace.
- `pyminishell.execution`: `Command`, one pipeline stage (`argv`, resolved
  `path`, optional `stdin`/`stdout` file descriptors, a recorded `error` and
  `error_code`), and `execute`, which runs a list of them as a pipeline.
  A lone builtin other than `echo` and `env` runs in the shell itself; every
  other stage runs in a child process, or, for builtins, on a copy of the
  shell state with its output fed into the pipe. `wait_for_children` sets the
  shell's status from the last stage, and `display_errors` writes each
  command's recorded error.

## Examples

```python
from pyminishell.textutils import atoi, split

split("a  b c", " ")   # ["a", "b", "c"]
atoi("  -42x")         # -42
```

```python
import sys
from pyminishell.environment import Environment, is_valid_env_var
from pyminishell.exports import format_export

env = Environment(["HOME=/home/user", "SHLVL=1"], "/home/user")
env.find("HOME")               # "/home/user"
env.find("SHLVL")              # "2"
is_valid_env_var("NAME=value") # True
format_export("NAME=value")    # 'NAME="value"'
env.display(sys.stdout)
```

```python
import sys
from pyminishell.builtins import Builtin, Shell, call_builtin, echo, is_builtin

echo(["echo", "-n", "hi"], sys.stdout)   # writes "hi" with no newline
is_builtin(["cd", "/tmp"])               # Builtin.CD
is_builtin(["ls"])                       # None

shell = Shell(["HOME=/home/user"], "/home/user")
call_builtin(shell, ["export", "GREETING=hello"], Builtin.EXPORT)
shell.env.find("GREETING")               # "hello"
```

```python
from pyminishell.builtins import Shell
from pyminishell.execution import Command, execute

shell = Shell()
execute(shell, [
    Command(argv=["echo", "one", "two"]),
    Command(argv=["wc", "-w"], path="/usr/bin/wc"),
])
shell.status   # exit status of the last stage
```

## What the package does not do

There is no interactive prompt, no command-line entry point, no history, and
no tokenizer or parser: quotes, `$` and `~` expansion, redirections and
heredocs are not handled. `execute` expects `Command` objects that are already
built, with the executable's `path` resolved and any redirection files opened
by the caller. Signal handling is not set up.

## Testing

The test suite uses pytest, available through the `test` extra.