"""Command-line entry point serving the Smart Planogram API."""

from __future__ import annotations

import argparse

import uvicorn


def main() -> None:
    parser = argparse.ArgumentParser(description="Run the Smart Planogram API server.")
    parser.add_argument("--host", default="127.0.0.1", help="Interface to bind.")
    parser.add_argument("--port", type=int, default=5000, help="Port to listen on.")
    parser.add_argument("--reload", action="store_true", help="Reload on code changes (development).")
    args = parser.parse_args()
    uvicorn.run("smart_planogram.server.app:app", host=args.host, port=args.port, reload=args.reload)


if __name__ == "__main__":
    main()
