"""Core of a small POSIX-style shell: string helpers, environment, exports, logical cwd, builtins and pipeline execution."""

__version__ = "0.1.0"