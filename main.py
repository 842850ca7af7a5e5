"""
Bellman-Ford Arbitrage Detector - Main Entry Point

Serves the graph builder and relaxation engine over HTTP:
- Simulated exchange-rate tables with an injected demo arbitrage loop
- Full, replayable Bellman-Ford step traces (JSON, CSV, or streamed)
- Negative-cycle detection with cycle profit
"""
import logging
import signal
import sys

import uvicorn

from config import WEB_HOST, WEB_PORT, LOG_LEVEL, LOG_FORMAT, LOG_DATE_FORMAT
from dashboard import app

# Configure logging
logging.basicConfig(
    level=getattr(logging, LOG_LEVEL, logging.INFO),
    format=LOG_FORMAT,
    datefmt=LOG_DATE_FORMAT
)
logger = logging.getLogger(__name__)

# Reduce noise from libraries
logging.getLogger('uvicorn.access').setLevel(logging.WARNING)


def handle_sigint(sig, frame):
    """Handle Ctrl+C gracefully"""
    logger.info("Received SIGINT, shutting down...")
    sys.exit(0)


def main():
    """Main entry point"""
    signal.signal(signal.SIGINT, handle_sigint)

    print(f"""
    ╔═══════════════════════════════════════════════════════════════════╗
    ║                                                                   ║
    ║     ⚡ BELLMAN-FORD ARBITRAGE DETECTOR ⚡                         ║
    ║                                                                   ║
    ║     Endpoints:                                                    ║
    ║       Currencies:       http://localhost:{WEB_PORT:<5}/api/currencies    ║
    ║       Run:              POST /api/run                             ║
    ║       Stream:           ws://localhost:{WEB_PORT:<5}/ws/run              ║
    ║       Export:           POST /api/export/trace/{{csv,json}}         ║
    ║                                                                   ║
    ╚═══════════════════════════════════════════════════════════════════╝
    """)

    uvicorn.run(
        app,
        host=WEB_HOST,
        port=WEB_PORT,
        log_level="warning"
    )


if __name__ == "__main__":
    main()
