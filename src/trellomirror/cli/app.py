"""CLI app entrypoint and error mapping."""

from __future__ import annotations

import sys

from trellomirror.contracts.exceptions import (
    AuthenticationError,
    ConfigError,
    LockTimeoutError,
    RemoteApiError,
    RetryExhaustedError,
    SyncError,
)


def main(argv: list[str] | None = None) -> int:
    import trellomirror.cli as cli

    parser = cli.build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        cli.logging.basicConfig(level=cli.logging.DEBUG, format="%(name)s %(message)s", stream=sys.stderr)
    elif args.command == "serve":
        cli.logging.basicConfig(level=cli.logging.INFO, format="%(name)s %(message)s", stream=sys.stderr)

    try:
        if args.command == "serve":
            cli._run_serve(args)
        elif args.command == "sweep":
            cli.asyncio.run(cli._run_sweep(args))
        elif args.command == "webhooks":
            cli.asyncio.run(cli._run_webhooks(args))
        elif args.command == "resolve-boards":
            cli.asyncio.run(cli._run_resolve_boards(args))
        elif args.command == "clean":
            cli.asyncio.run(cli._run_clean(args))
        return 0
    except ConfigError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 3
    except (AuthenticationError, RemoteApiError, RetryExhaustedError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 4
    except (SyncError, LockTimeoutError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 5
    except Exception as exc:  # pragma: no cover - defensive fallback
        print(f"error: {exc}", file=sys.stderr)
        return 1


__all__ = ["main"]
