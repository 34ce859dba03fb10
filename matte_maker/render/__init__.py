"""Render package public API.

Command generation, shell escaping and font parsing are pure. Import the Qt
worker explicitly when needed:
    - `from matte_maker.render.render_worker import RenderController`
"""

from .convert_command import CONVERT_PROGRAM, MissingCropError, build_render_command
from .process_runner import ProcessResult, ProcessRunner, SubprocessRunner
from .shell_escape import escape_shell_arg, format_command_line

__all__ = [
    "CONVERT_PROGRAM",
    "MissingCropError",
    "ProcessResult",
    "ProcessRunner",
    "SubprocessRunner",
    "build_render_command",
    "escape_shell_arg",
    "format_command_line",
]
