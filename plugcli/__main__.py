"""Run plugcli as a module: `python -m plugcli`."""

from .app import main

main()
