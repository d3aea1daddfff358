"""Diagnostic output for tensorlake_cloud, written to stderr only.

The library never writes to stdout and is silent by default. When verbose
mode is on, the transport traces every request and response status line
through :func:`debug`. Verbose mode is enabled either by installing a
manager explicitly::

    from tensorlake_cloud.output import OutputManager, set_output

    set_output(OutputManager(verbose=True))

or by setting the ``TENSORLAKE_DEBUG`` environment variable to a truthy
value (``1``, ``true``, ``yes``) before the first call.

Colour follows `clig.dev <https://clig.dev/>`_ conventions: it is disabled
by ``NO_COLOR``, ``TERM=dumb`` or ``no_color=True``.
"""

from __future__ import annotations

import os
import sys
from typing import Optional

from rich.console import Console

_DEBUG_ENV_VAR = "TENSORLAKE_DEBUG"


class OutputManager:
    """Holder for the stderr :class:`~rich.console.Console` and verbosity flags.

    Args:
        no_color: Disable all colour and Rich markup.
        verbose: Emit debug messages. ``None`` reads ``TENSORLAKE_DEBUG``.
    """

    def __init__(
        self,
        no_color: bool = False,
        verbose: Optional[bool] = None,
    ) -> None:
        self._no_color = no_color or _should_disable_color()
        self._verbose = _env_verbose() if verbose is None else verbose
        self._stderr = Console(
            file=sys.stderr,
            no_color=self._no_color,
            stderr=True,
            highlight=False,
        )

    @property
    def is_verbose(self) -> bool:
        """Whether debug messages are emitted."""
        return self._verbose

    def debug(self, message: str) -> None:
        """Print a debug message to stderr. Only shown in verbose mode.

        Args:
            message: The debug text (prefixed with ``[debug]`` on output).
        """
        if self._verbose:
            if self._no_color:
                print(f"[debug] {message}", file=sys.stderr, flush=True)
            else:
                self._stderr.print(f"[dim]\\[debug] {message}[/dim]")

    def warning(self, message: str) -> None:
        """Print a yellow warning to stderr. Only shown in verbose mode.

        Args:
            message: The warning text.
        """
        if not self._verbose:
            return
        if self._no_color:
            print(f"Warning: {message}", file=sys.stderr, flush=True)
        else:
            self._stderr.print(f"[yellow]Warning:[/yellow] {message}")


# ------------------------------------------------------------------ #
# Module-level helpers
# ------------------------------------------------------------------ #


def _env_verbose() -> bool:
    return os.environ.get(_DEBUG_ENV_VAR, "").strip().lower() in ("1", "true", "yes", "on")


def _should_disable_color() -> bool:
    """Check if color should be disabled per clig.dev.

    Returns True when NO_COLOR env var is set (any value) or TERM=dumb.
    """
    if os.environ.get("NO_COLOR") is not None:
        return True
    if os.environ.get("TERM") == "dumb":
        return True
    return False


# ------------------------------------------------------------------ #
# Global output instance
# ------------------------------------------------------------------ #

_output: Optional[OutputManager] = None


def get_output() -> OutputManager:
    """Return the global :class:`OutputManager` instance.

    If no instance has been installed via :func:`set_output`, a default
    one is created lazily (verbose only when ``TENSORLAKE_DEBUG`` is set).

    Returns:
        The active :class:`OutputManager`.
    """
    global _output
    if _output is None:
        _output = OutputManager()
    return _output


def set_output(output: OutputManager) -> None:
    """Install *output* as the global :class:`OutputManager` instance."""
    global _output
    _output = output


def reset_output() -> None:
    """Reset the global :class:`OutputManager` to ``None``.

    Primarily useful in test suites to ensure a clean state between tests.
    """
    global _output
    _output = None


def debug(message: str) -> None:
    """Print debug message to stderr via the global OutputManager."""
    get_output().debug(message)


def warning(message: str) -> None:
    """Print warning to stderr via the global OutputManager."""
    get_output().warning(message)
