"""Managed block appended to a user's .bashrc"""

import logging
import os
from pathlib import Path
from typing import Optional

from hostkit.privilege.executor import PrivilegedExecutor

logger = logging.getLogger(__name__)

STAMP = "# >>> hostkit >>>"

BLOCK = r"""# >>> hostkit >>>
alias ll='ls -alF'
alias gs='git status'
alias venv='python3 -m venv .venv && source .venv/bin/activate'
export EDITOR=nvim
parse_git_branch() { git branch 2>/dev/null | sed -n '/\* /s///p'; }
PS1='\u@\h \W $(parse_git_branch) \$ '
# <<< hostkit <<<
"""


def bashrc_path(user: str) -> Path:
    return Path(os.path.expanduser(f"~{user}")) / ".bashrc"


def patch_bashrc(
    target: Path,
    owner: Optional[str] = None,
    executor: Optional[PrivilegedExecutor] = None,
) -> bool:
    """Append the managed block once; returns False when already patched"""
    try:
        existing = target.read_text()
    except FileNotFoundError:
        existing = ""

    if STAMP in existing:
        logger.info(".bashrc already patched. Skipping")
        return False

    with open(target, "a") as f:
        if existing and not existing.endswith("\n"):
            f.write("\n")
        f.write(BLOCK)

    # running as root leaves the file owned by root
    if owner and executor is not None and executor.is_privileged():
        executor.run(["chown", f"{owner}:{owner}", str(target)], check=False)

    logger.info(".bashrc updated")
    return True
