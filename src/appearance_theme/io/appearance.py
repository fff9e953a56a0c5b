"""Live system appearance detection.

Queried at decision time by the command-line host. Independent of the
dispatcher's last-seen mode.
"""

from __future__ import annotations

import logging
import os
import subprocess
import sys

from appearance_theme.core.modes import Mode

logger = logging.getLogger(__name__)

_PROBE_TIMEOUT = 2.0


def _run(args: list[str]) -> str | None:
    try:
        proc = subprocess.run(
            args,
            capture_output=True,
            text=True,
            timeout=_PROBE_TIMEOUT,
            check=False,
        )
    except (OSError, subprocess.SubprocessError) as e:
        logger.debug("Appearance probe %s failed: %s", args[0], e)
        return None
    if proc.returncode != 0:
        return None
    return proc.stdout.strip()


def _macos_mode() -> Mode | None:
    out = _run(["defaults", "read", "-g", "AppleInterfaceStyle"])
    # The key is absent (non-zero exit) in light mode.
    if out is None:
        return Mode.LIGHT
    return Mode.DARK if out.lower() == "dark" else Mode.LIGHT


def _gnome_mode() -> Mode | None:
    out = _run(["gsettings", "get", "org.gnome.desktop.interface", "color-scheme"])
    if out is None:
        return None
    return Mode.DARK if "dark" in out.lower() else Mode.LIGHT


def detect_mode() -> Mode:
    """Return the live appearance mode.

    $APPEARANCE_THEME_MODE wins; then macOS defaults, then GNOME gsettings.
    Falls back to light.
    """
    forced = os.environ.get("APPEARANCE_THEME_MODE")
    if forced:
        return Mode.parse(forced)

    if sys.platform == "darwin":
        detected = _macos_mode()
    elif sys.platform.startswith("linux"):
        detected = _gnome_mode()
    else:
        detected = None
    return detected or Mode.LIGHT
