#!/usr/bin/env python3
"""
Main entry point for the LAN chat server
"""

import asyncio
import logging
import signal
import sys

from .config import load_config, print_config_summary
from .errors.handling import log_error
from .errors.internal import ConfigError

# Configure logging after imports to prevent other modules from configuring it
from .logging_config import LoggerConfigurator
from .server.run import run_server

configurator = LoggerConfigurator()
configurator.configure()


def install_signal_handlers(stop: asyncio.Event) -> None:  # pragma: no cover
    """Set ``stop`` on SIGINT/SIGTERM for an orderly shutdown."""
    loop = asyncio.get_running_loop()

    def handler(signum: int) -> None:
        if stop.is_set():
            return
        logging.warning(f"🛑 Signal received - initiating shutdown (signal={signum})")
        stop.set()

    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, handler, sig)
        except (NotImplementedError, RuntimeError):
            # Platforms without loop signal support fall back to KeyboardInterrupt
            pass


async def main() -> None:
    """Load configuration and serve until a shutdown signal arrives.

    Raises:
        SystemExit: If configuration is invalid or the server fails.
    """
    try:
        logging.info("🚀 Starting LAN chat server")
        config = load_config()
        print_config_summary(config)
        stop = asyncio.Event()
        install_signal_handlers(stop)
        await run_server(config, stop)
    except asyncio.CancelledError:
        raise
    except KeyboardInterrupt:
        pass
    except Exception as e:
        log_error("Main application error", e)
        sys.exit(1)
    finally:
        logging.info("✅ Application shutdown complete")


def health_check() -> int:
    """Validate configuration without binding; returns a process exit code."""
    logging.info("🏥 Health check mode")
    try:
        config = load_config()
    except ConfigError as e:
        logging.error(f"❌ Health check failed: {e}")
        return 1
    logging.info(f"✅ Health check passed - listen={config.host}:{config.port}")
    return 0


def run(argv: list[str] | None = None) -> None:
    """Synchronous entry point for the application.

    Raises:
        SystemExit: On health check completion or a critical error.
    """
    args = sys.argv[1:] if argv is None else argv
    if args and args[0] == "--health-check":
        sys.exit(health_check())
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        sys.exit(0)
    except asyncio.CancelledError:
        sys.exit(0)
    except Exception as e:
        log_error("Top-level error", e)
        sys.exit(1)


if __name__ == "__main__":
    run()
