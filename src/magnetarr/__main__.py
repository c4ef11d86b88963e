from magnetarr.interfaces.cli.cli import start

raise SystemExit(start())
