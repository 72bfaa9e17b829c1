#!/usr/bin/env python3
"""Discover Trail Races — Cost Per KM site.

Launch: python3 cost_per_km.py
Serves at http://0.0.0.0:8000 (or PORT env var)
"""

import sys

import uvicorn

from trail_costs.config import HOST, LOG_LEVEL, PORT, require_airtable_credentials


def main():
    print("=" * 60)
    print("  Discover Trail Races — Cost Per KM")
    print("=" * 60)

    try:
        require_airtable_credentials()
    except RuntimeError as e:
        print(f"\n  ERROR: {e}. Set environment variables (or .env):")
        print("    AIRTABLE_TOKEN, AIRTABLE_BASE_ID\n")
        sys.exit(1)

    print(f"\nStarting server on {HOST}:{PORT}")
    url = f"http://{HOST}:{PORT}"
    print(f"\n  Cost index: {url}/cost")
    print("  Press Ctrl+C to stop\n")

    from trail_costs.app import create_app
    app = create_app()
    uvicorn.run(app, host=HOST, port=PORT, log_level=LOG_LEVEL)


if __name__ == "__main__":
    main()
