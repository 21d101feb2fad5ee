"""Local command execution"""

from .runner import CommandResult, command_exists, invoking_user, run_command

__all__ = ["CommandResult", "command_exists", "invoking_user", "run_command"]
