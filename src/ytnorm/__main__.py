"""Allow ``python -m ytnorm`` invocation.

This module simply delegates to the CLI error-boundary entry point so
that ``python -m ytnorm`` behaves identically to the ``ytnorm``
console script.
"""

from __future__ import annotations

from ytnorm.cli.app import cli

if __name__ == "__main__":
    cli()
