"""
Service configuration, read once from the environment at import time.

Every tunable of the web layer lives here so that app.py and server.py never
call os.getenv themselves. Defaults match a local development run: listen on
all interfaces, port 3000, INFO logging, CORS open to any origin.
"""

import os

# ---------------------------------------------------------------------------
# Server
# ---------------------------------------------------------------------------

HOST: str = os.getenv("CHESS_API_HOST", "0.0.0.0")
PORT: int = int(os.getenv("CHESS_API_PORT", "3000"))

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

LOG_LEVEL: str = os.getenv("CHESS_API_LOG_LEVEL", "INFO").upper()
LOG_FORMAT: str = "%(asctime)s %(levelname)s %(name)s: %(message)s"

# ---------------------------------------------------------------------------
# HTTP middleware
# ---------------------------------------------------------------------------

# Comma-separated list; "*" allows any origin.
ALLOWED_ORIGINS: list[str] = [
    origin.strip() for origin in os.getenv("ALLOWED_ORIGINS", "*").split(",") if origin.strip()
]

# Responses smaller than this many bytes are sent uncompressed.
GZIP_MINIMUM_SIZE: int = int(os.getenv("GZIP_MINIMUM_SIZE", "500"))

# ---------------------------------------------------------------------------
# Banners
# ---------------------------------------------------------------------------

ROOT_BANNER: str = "Chess REST API. See /health and /games endpoints."
HEALTH_BANNER: str = "ok"
