"""Allow ``python -m consolectl`` invocation.

Delegates to the CLI error-boundary entry point so that
``python -m consolectl`` behaves identically to the ``consolectl``
console script.
"""

from __future__ import annotations

from consolectl.cli.app import cli

if __name__ == "__main__":
    cli()
