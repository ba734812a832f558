#!/usr/bin/env python3
"""
Run the store gateway with uvicorn.

Reads PORT (default 5000) and UVICORN_RELOAD from the environment / .env.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

import uvicorn
from dotenv import load_dotenv

load_dotenv()


def main() -> None:
    port = int(os.getenv("PORT", "5000"))
    reload_flag = os.getenv("UVICORN_RELOAD", "").lower() in ("1", "true", "yes")
    print(f"Server running on port {port}")
    uvicorn.run("src.api.main:app", host="0.0.0.0", port=port, reload=reload_flag)


if __name__ == "__main__":
    main()
