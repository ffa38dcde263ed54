"""CLI entry point for the merge bridge server."""

import argparse
import os


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="rose-bridge",
        description="Rose Token merge bridge: merges pull requests on on-chain TaskApproved events",
    )
    parser.add_argument("--host", default=None, help="Bind host (default: ROSE_BRIDGE_HOST or 0.0.0.0)")
    parser.add_argument("--port", type=int, default=None, help="Bind port (default: ROSE_BRIDGE_PORT or 3000)")
    parser.add_argument(
        "--marketplace-address",
        default=None,
        help="Expected marketplace contract address (overrides the deployment artifact)",
    )
    parser.add_argument(
        "--dev",
        action="store_true",
        help="Colored console logs instead of JSON",
    )
    args = parser.parse_args(argv)

    if args.marketplace_address:
        os.environ["ROSE_BRIDGE_MARKETPLACE_ADDRESS"] = args.marketplace_address
    if args.dev:
        os.environ["ROSE_BRIDGE_JSON_LOGS"] = "0"

    import uvicorn

    from rose_bridge.config import Settings

    settings = Settings()
    uvicorn.run(
        "rose_bridge.main:app",
        host=args.host or settings.host,
        port=args.port or settings.port,
    )


if __name__ == "__main__":
    main()
