#!/usr/bin/env python3
"""Start the routing API with uvicorn, honouring the PORT environment variable."""

import os
import sys
from pathlib import Path

import uvicorn


def _port() -> int:
    port = os.environ.get("PORT", "8000")
    try:
        return int(port)
    except ValueError:
        print(f"Warning: Invalid PORT value '{port}', using default 8000", file=sys.stderr)
        return 8000


def main() -> None:
    project_root = Path(__file__).resolve().parent
    sys.path.insert(0, str(project_root))

    port = _port()
    print(f"Starting delivery routing API on port {port}...", file=sys.stderr)
    print(f"Working directory: {os.getcwd()}", file=sys.stderr)

    # Trust forwarded headers from the hosting proxy
    uvicorn.run(
        "src.app.main:app",
        host="0.0.0.0",
        port=port,
        proxy_headers=True,
        forwarded_allow_ips="*",
    )


if __name__ == "__main__":
    main()
