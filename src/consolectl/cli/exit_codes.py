"""Process exit codes returned by :func:`consolectl.cli.app.main`.

``USAGE_ERROR`` and ``UNEXPECTED_ERROR`` share ``2``: argparse exits
with it on bad arguments, and a crash is reported the same way.
"""

from __future__ import annotations

SUCCESS: int = 0
GENERAL_ERROR: int = 1  # a ConsoleCliError, printed as "Error: ..." on stderr
USAGE_ERROR: int = 2
UNEXPECTED_ERROR: int = 2
KEYBOARD_INTERRUPT: int = 130  # 128 + SIGINT
