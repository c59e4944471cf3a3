"""Entry point for running the asset builder as a module."""

from __future__ import annotations

from .cli import main

if __name__ == "__main__":
    main()
