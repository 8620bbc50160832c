#!/usr/bin/env python
"""
Run the order pricing API under uvicorn.

Usage:
    python scripts/run_api.py [--port 8000] [--no-reload]

ORDER_PRICING_CATALOG_DIR and ORDER_PRICING_TAX_RATE are passed through.
"""
import argparse
import os
import subprocess
import sys
from pathlib import Path


def main():
    parser = argparse.ArgumentParser(description="Run the order pricing API")
    parser.add_argument("--host", default=os.environ.get("ORDER_PRICING_HOST", "0.0.0.0"))
    parser.add_argument("--port", type=int, default=int(os.environ.get("ORDER_PRICING_PORT", "8000")))
    parser.add_argument("--no-reload", action="store_true")
    args = parser.parse_args()

    project_root = Path(__file__).parent.parent

    # Ensure src is in python path
    env = os.environ.copy()
    src_path = str(project_root / "src")
    if "PYTHONPATH" in env:
        env["PYTHONPATH"] = f"{src_path}{os.pathsep}{env['PYTHONPATH']}"
    else:
        env["PYTHONPATH"] = src_path

    cmd = [
        sys.executable, "-m", "uvicorn",
        "order_pricing.api.main:app",
        "--host", args.host,
        "--port", str(args.port),
    ]
    if not args.no_reload:
        cmd.append("--reload")

    print(f"Starting Order Pricing API on {args.host}:{args.port}...")
    try:
        subprocess.run(cmd, env=env, cwd=str(project_root))
    except KeyboardInterrupt:
        print("\nAPI stopped.")


if __name__ == "__main__":
    main()
