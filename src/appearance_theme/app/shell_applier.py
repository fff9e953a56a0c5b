"""Apply collaborator that runs a user-configured shell command.

The template may reference {theme} and {mode}; both are shell-quoted
before substitution. Example settings entry:

    "apply_command": "kitty +kitten themes --reload-in=all {theme}"
"""

from __future__ import annotations

import logging
import shlex
import subprocess
from collections.abc import Callable
from typing import Optional

from appearance_theme.core.errors import ApplyFailed
from appearance_theme.core.modes import Mode

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0


class ShellCommandApplier:
    def __init__(
        self,
        command_template: str,
        mode_provider: Optional[Callable[[], Mode]] = None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self.command_template = command_template
        self.mode_provider = mode_provider
        self.timeout = timeout

    def render(self, item: str) -> str:
        return self.command_template.format(
            theme=shlex.quote(item),
            mode=shlex.quote(self.mode_provider().value if self.mode_provider else ""),
        )

    def apply(self, item: str) -> None:
        try:
            command = self.render(item)
        except (KeyError, IndexError, ValueError) as e:
            raise ApplyFailed(f"Bad apply_command template {self.command_template!r}: {e}") from e
        logger.debug("Running apply command: %s", command)
        try:
            result = subprocess.run(
                command,
                shell=True,
                capture_output=True,
                text=True,
                timeout=self.timeout,
                check=False,
            )
        except subprocess.TimeoutExpired as e:
            raise ApplyFailed(f"Apply command timed out after {self.timeout:g}s") from e
        except OSError as e:
            raise ApplyFailed(f"Could not run apply command: {e}") from e
        if result.returncode != 0:
            stderr_snippet = result.stderr.strip()[:500] if result.stderr else "(no stderr)"
            raise ApplyFailed(f"Exit code {result.returncode}: {stderr_snippet}")
