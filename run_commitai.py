#!/usr/bin/env python
"""
Thin wrapper script to invoke the commitai CLI.

Running ``python run_commitai.py`` is equivalent to running the
``commitai`` console script installed via ``pyproject.toml``.
"""

from commitai.cli import main


if __name__ == "__main__":
    main(prog_name="commitai")
