"""Run the API and front-end server: ``python -m lptagger``."""

import argparse
import logging
import socket

import uvicorn

from lptagger.config import settings

logger = logging.getLogger("lptagger")

PORT_SCAN_RANGE = 20


def is_port_available(host: str, port: int) -> bool:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        try:
            sock.bind((host, port))
        except OSError:
            return False
    return True


def find_available_port(host: str, start_port: int, span: int = PORT_SCAN_RANGE) -> int:
    """First free port in ``[start_port, start_port + span)``."""
    for port in range(start_port, start_port + span):
        if is_port_available(host, port):
            return port
    raise RuntimeError(f"No available port found starting from {start_port}")


def main(argv=None) -> None:
    parser = argparse.ArgumentParser(description="LP Tagger server")
    parser.add_argument("--host", default=settings.HOST, help="Interface to bind")
    parser.add_argument("--port", type=int, default=settings.PORT, help="Preferred port")
    parser.add_argument("--log-level", default=settings.LOG_LEVEL, help="Logging level")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    port = find_available_port(args.host, args.port)
    if port != args.port:
        logger.info(f"Port {args.port} is busy, using port {port} instead")

    logger.info(f"Server running on http://localhost:{port}/")
    uvicorn.run("lptagger.main:app", host=args.host, port=port, log_level=args.log_level.lower())


if __name__ == "__main__":
    main()
