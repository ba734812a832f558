#!/usr/bin/env python3
"""
Smoke test for the newsletter endpoint against a running server.

Start the API first:
  uvicorn src.api.main:app --host 127.0.0.1 --port 5000

Then run:
  python scripts/test_newsletter.py
  python scripts/test_newsletter.py --base-url http://127.0.0.1:5000 --email someone@example.com
"""

from __future__ import annotations

import argparse
import os
import sys
import time

import requests
from dotenv import load_dotenv

load_dotenv()


def main() -> int:
    parser = argparse.ArgumentParser(description="POST a signup to /api/newsletter")
    parser.add_argument("--base-url", default=os.getenv("API_URL", "http://127.0.0.1:5000"))
    parser.add_argument("--email", default=None, help="Defaults to a unique test address")
    parser.add_argument("--twice", action="store_true", help="Submit the same address twice")
    args = parser.parse_args()

    email = args.email or f"testuser{int(time.time() * 1000)}@example.com"
    url = f"{args.base_url.rstrip('/')}/api/newsletter"

    for attempt in range(2 if args.twice else 1):
        try:
            resp = requests.post(url, json={"email": email}, timeout=15)
        except requests.RequestException as e:
            print(f"Error testing newsletter: {e}", file=sys.stderr)
            print("   → Start the API first: uvicorn src.api.main:app --host 127.0.0.1 --port 5000", file=sys.stderr)
            return 1
        print(f"[{attempt + 1}] {resp.status_code} Response:", resp.json())

    return 0


if __name__ == "__main__":
    sys.exit(main())
