from cycle_guard.cli import cli

cli()
