"""Serve command."""

from __future__ import annotations

import argparse


def run_serve(args: argparse.Namespace) -> None:
    import trellomirror.cli as cli

    config = cli.load_config(args.config)
    credentials = cli.asyncio.run(cli.create_credential_resolver(config).resolve())
    mirror = cli.TrelloMirror.create(config, credentials)
    app = cli.create_app(mirror, run_scheduler=not args.no_scheduler)
    cli.uvicorn.run(app, host=args.host, port=args.port, log_level="debug" if args.verbose else "info")


__all__ = ["run_serve"]
