#!/usr/bin/env python3
"""Serve the read API (the ingestion scheduler runs inside it)."""

import os
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

import uvicorn

from cfo_feeds.config.logging import configure_logging
from cfo_feeds.config.settings import settings


if __name__ == "__main__":
    configure_logging(settings.log_level, settings.log_json)
    uvicorn.run(
        "cfo_feeds.api.app:create_app",
        factory=True,
        host=os.environ.get("HOST", "0.0.0.0"),
        port=int(os.environ.get("PORT", 5000)),
    )
