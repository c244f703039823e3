"""
Entry point for the arbitrage scanner.

Usage:
    python -m crossarb           # serve GET /arbitrage
    python -m crossarb --once    # run a single scan and print JSON
    crossarb                     # if installed via pip
"""

import argparse
import asyncio
import sys


# Try to use uvloop for better performance
try:
    import uvloop

    UVLOOP_ENABLED = True
except ImportError:
    UVLOOP_ENABLED = False


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="crossarb",
        description="Cross-venue crypto arbitrage scanner",
    )
    parser.add_argument(
        "--once",
        action="store_true",
        help="Run a single scan, print the opportunities as JSON and exit",
    )
    return parser.parse_args(argv)


async def scan_once() -> int:
    """Run one scan against the configured venues and print the result."""
    import orjson

    from crossarb.config.settings import get_settings
    from crossarb.core.engine import ScanOrchestrator
    from crossarb.exchange.registry import VenueRegistry

    settings = get_settings()
    registry = await VenueRegistry.open(settings)
    try:
        orchestrator = ScanOrchestrator.from_settings(settings, registry)
        result = await orchestrator.run_serialized()
    finally:
        await registry.close()

    sys.stdout.write(orjson.dumps(result, option=orjson.OPT_INDENT_2).decode() + "\n")
    return 0


def main(argv: list[str] | None = None) -> int:
    """
    Main entry point.

    Returns:
        Exit code (0 for success).
    """
    from crossarb import __version__
    from crossarb.config.settings import get_settings
    from crossarb.telemetry.logger import setup_logging

    args = parse_args(argv)

    # Load settings
    try:
        settings = get_settings()
    except Exception as e:
        print(f"Configuration error: {e}")
        print("\nCheck VENUES, VENUE_TIMEOUT_MS, THRESHOLD_PCT and PORT in your .env file.")
        return 1

    async_logger = setup_logging(level=settings.log_level, log_file=settings.log_file)

    try:
        if args.once:
            try:
                if UVLOOP_ENABLED:
                    return uvloop.run(scan_once())
                return asyncio.run(scan_once())
            except Exception as e:
                print(f"\nScan failed: {e}")
                return 1

        print(
            f"""
╔═══════════════════════════════════════════════════════════════╗
║     CROSS-VENUE ARBITRAGE SCANNER v{__version__:<21}      ║
╚═══════════════════════════════════════════════════════════════╝
    """
        )

        print("Configuration:")
        print(f"  Venues:         {', '.join(settings.venues)}")
        print(f"  Timeout:        {settings.venue_timeout_ms} ms per request")
        print(f"  Threshold:      {settings.threshold_pct:.2f}%")
        print(f"  Concurrency:    {'sequential' if settings.is_sequential else settings.max_concurrency}")
        print(f"  Static files:   {settings.static_dir or 'disabled'}")
        print(f"  uvloop:         {'Enabled' if UVLOOP_ENABLED else 'Disabled'}")
        print()
        print(f"Server is running at http://localhost:{settings.port}")

        import uvicorn

        uvicorn.run(
            "crossarb.dashboard.server:create_app",
            factory=True,
            host=settings.host,
            port=settings.port,
            loop="uvloop" if UVLOOP_ENABLED else "asyncio",
            log_level="warning",
        )
        return 0

    except KeyboardInterrupt:
        print("\nInterrupted by user")
        return 0

    finally:
        async_logger.stop()


if __name__ == "__main__":
    sys.exit(main())
