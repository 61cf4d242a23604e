# =============================================================================
# src/cli/__main__.py — Package Entry Point
# =============================================================================
#
# This file enables running the CLI package itself as a module:
#     python -m src.cli stats ChIJ123
#
# It delegates to the verification CLI (verify.py), the only CLI tool.
# =============================================================================

"""Allow ``python -m src.cli`` execution."""

from src.cli.verify import main

main()
