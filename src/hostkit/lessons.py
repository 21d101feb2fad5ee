"""Short Debian-focused Linux lessons"""

from dataclasses import dataclass
from typing import List, Optional


@dataclass(frozen=True)
class Lesson:
    title: str
    body: str


LESSONS: List[Lesson] = [
    Lesson(
        "Terminal 101, what this thing is",
        """\
The terminal is a text window that talks to your shell. The shell reads a line, runs a program, prints output.
- Prompt shows user and folder. Example: user@debian ~/project $
- A command is: program name, then flags, then arguments.
  program -flags arguments
- Flags usually start with single dash or double dash. Example: ls -l or ls --all
- Up and down arrows go through history. Tab completes names. Ctrl C cancels a running command. Ctrl L clears the screen.
- Manual pages help. man ls. Most programs also have --help.
Try these right now
  echo "hello terminal"
  whoami
  date
  man echo       (press q to quit)
  clear""",
    ),
    Lesson(
        "Files and navigation, ls cd mkdir",
        """\
Everything lives in a directory tree that starts at /. Your home is /home/yourname.
- pwd, print working directory
- ls, list files
- ls -l, long view with permissions
- ls -a, include hidden files that start with .
- ls -lah, long, all, human sizes
- cd /path, go to an absolute path
- cd .., go up one folder
- cd -, jump back to previous folder
- cd, go to your home
- mkdir NAME, make a directory
- mkdir -p a/b/c, make nested directories""",
    ),
    Lesson(
        "Core commands, sudo nano rm pwd",
        """\
sudo lets a trusted user run a command as root. It asks for your password.
nano is a simple text editor in the terminal.
rm removes files. Careful, this is permanent.
pwd shows where you are.""",
    ),
    Lesson(
        "Viewing and editing files, cat less head tail",
        """\
- cat file, print file content
- less file, pager. space to scroll. q to quit.
- head -n 20 file, first 20 lines
- tail -n 20 file, last 20 lines
- tail -f file, follow new lines, like logs""",
    ),
    Lesson(
        "Packages on Debian, apt basics",
        """\
- sudo apt update
- sudo apt install pkg
- apt search keyword
- apt show pkg
- sudo apt remove pkg
- sudo apt purge pkg
- sudo apt autoremove""",
    ),
    Lesson(
        "Processes and services, top btop systemctl",
        """\
- ps aux | less, snapshot of processes
- top, live process view
- btop, pretty top
- systemctl status NAME, check a service
- sudo systemctl restart NAME""",
    ),
    Lesson(
        "Permissions and ownership, chmod chown",
        """\
- chmod 644 file, rw for user, r for group and others
- chmod 755 script, rwx for user, rx for group and others
- sudo chown user:group file""",
    ),
    Lesson(
        "Networking basics, ip ping curl ss",
        """\
- ip a
- ip r
- ping -c 4 example.com
- curl -I https://example.com
- ss -tulpn""",
    ),
    Lesson(
        "Search and find, grep find locate",
        """\
- grep -R "needle" .
- find . -name "*.sh"
- locate sshd_config""",
    ),
    Lesson(
        "Disks and space, df du lsblk",
        """\
- df -h
- du -sh *
- lsblk""",
    ),
    Lesson(
        "Shell superpowers, pipes redirects quoting",
        """\
- cmd1 | cmd2
- cmd > out.txt, cmd >> out.txt
- cmd 2> err.txt, cmd > all.txt 2>&1
- "double" vs 'single' quotes""",
    ),
]


def get_lesson(number: int) -> Optional[Lesson]:
    """1-based lookup"""
    if 1 <= number <= len(LESSONS):
        return LESSONS[number - 1]
    return None
