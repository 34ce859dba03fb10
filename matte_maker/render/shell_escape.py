"""Human-copyable shell quoting for generated commands.

Display-only: rendering passes argument lists straight to the process, so
nothing here is on the execution path.
"""

from __future__ import annotations

import re
from collections.abc import Iterable

_DQ_SPECIAL = re.compile(r'([$`"\\])')
_BARE_UNSAFE = re.compile(r"([^\w=+:,./-])", re.ASCII)


def escape_shell_arg(arg: str) -> str:
    """Return the shortest POSIX-shell quoting of ``arg`` that parses back to it.

    Candidates, earliest wins on ties: single-quoted, double-quoted with
    backslash escapes, and bare with backslash escapes.
    """
    if not arg:
        return "''"

    candidates = ["'" + arg.replace("'", "'\\''") + "'"]
    if "\n" not in arg:
        # Inside double quotes '!' would trigger history expansion in bash.
        if "!" not in arg:
            candidates.append('"' + _DQ_SPECIAL.sub(r"\\\1", arg) + '"')
        # A backslash-newline is a line continuation, never a literal newline.
        candidates.append(_BARE_UNSAFE.sub(r"\\\1", arg))
    return min(candidates, key=len)


def format_command_line(program: str, args: Iterable[str]) -> str:
    return " ".join([program, *(escape_shell_arg(a) for a in args)])
