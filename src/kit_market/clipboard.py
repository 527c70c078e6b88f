"""Copy text to the system clipboard using whatever tool the platform has."""

import sys
import shutil
import logging
import subprocess
from typing import List, Optional


logger = logging.getLogger(__name__)

# How long the UI shows "Copied!" after a successful copy
COPIED_FEEDBACK_SECONDS = 2.0

# Tried in order; the first one found on PATH is used
CLIPBOARD_COMMANDS = [
    ["pbcopy"],                                 # macOS
    ["wl-copy"],                                # Wayland
    ["xclip", "-selection", "clipboard"],       # X11
    ["xsel", "--clipboard", "--input"],         # X11
    ["clip"],                                   # Windows
]


def find_clipboard_command() -> Optional[List[str]]:
    """Return the clipboard command available on this machine, if any."""
    if sys.platform == "win32" and shutil.which("clip"):
        return ["clip"]
    for cmd in CLIPBOARD_COMMANDS:
        if shutil.which(cmd[0]):
            return cmd
    return None


def copy_text(text: str) -> bool:
    """Copy ``text`` to the clipboard.

    Returns True on success. Failures are not reported to the user; they
    only show up in the debug log.
    """
    cmd = find_clipboard_command()
    if cmd is None:
        logger.debug("No clipboard tool found")
        return False

    try:
        result = subprocess.run(
            cmd,
            input=text,
            capture_output=True,
            text=True,
            timeout=5,
        )
    except (OSError, subprocess.SubprocessError) as e:
        logger.debug("Clipboard copy with %s failed: %s", cmd[0], e)
        return False
    return result.returncode == 0
