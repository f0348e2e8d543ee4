#!/usr/bin/env python3
"""
Run the Rollcall API server.

Usage:
    python scripts/run_api.py
    python scripts/run_api.py --host 0.0.0.0 --port 8000
    ROLLCALL_BACKEND=ldap ROLLCALL_LDAP_HOST=dc01 python scripts/run_api.py
"""

import argparse
import logging

import uvicorn

from rollcall.config import RollcallConfig


def main():
    config = RollcallConfig.from_env()

    parser = argparse.ArgumentParser(description="Run Rollcall API server")
    parser.add_argument("--host", default=config.api_host, help="Host to bind to")
    parser.add_argument("--port", type=int, default=config.api_port, help="Port to bind to")
    parser.add_argument("--reload", action="store_true", help="Enable auto-reload")

    args = parser.parse_args()

    logging.basicConfig(
        level=config.log_level,
        format='%(asctime)s - %(levelname)s - %(message)s',
    )

    uvicorn.run(
        "rollcall.api.app:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
    )


if __name__ == "__main__":
    main()
