"""Allow `python -m nutriplan` to run the CLI."""

from nutriplan.cli import main

main()
