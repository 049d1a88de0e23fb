#!/usr/bin/env python3

"""
Runtime configuration for the AIRAC import service.

Values come from environment variables so the same code runs for local
development, tests and the division server.
"""

import os
from typing import List

# Environment Configuration
ENVIRONMENT = os.getenv("ENVIRONMENT", "development")
FORCE_HTTPS = ENVIRONMENT == "production"

# Logging Configuration
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Upload limits
MAX_UPLOAD_BYTES = int(os.getenv("AIRAC_MAX_UPLOAD_BYTES", str(20 * 1024 * 1024)))  # 20 MB

# Encodings tried after UTF-8 and detection fail. latin-1 decodes any byte
# sequence, listing it here means EncodingError is never raised.
FALLBACK_ENCODINGS: List[str] = [
    enc.strip()
    for enc in os.getenv("AIRAC_FALLBACK_ENCODINGS", "cp1252").split(",")
    if enc.strip()
]

# Minimum chardet confidence before a detected encoding is used
ENCODING_MIN_CONFIDENCE = float(os.getenv("AIRAC_ENCODING_MIN_CONFIDENCE", "0.5"))

# SQLite busy timeout in seconds
SQLITE_TIMEOUT = float(os.getenv("AIRAC_SQLITE_TIMEOUT", "5.0"))

# CORS Configuration
ALLOWED_ORIGINS = [
    origin.strip()
    for origin in os.getenv(
        "AIRAC_ALLOWED_ORIGINS",
        "http://localhost:3000,http://localhost:8000,http://127.0.0.1:8000",
    ).split(",")
    if origin.strip()
]

# Security Headers
SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "strict-origin-when-cross-origin",
}


# Database Security
def get_safe_db_path() -> str:
    """Get a safe database path with validation."""
    db_path = os.getenv("AIRAC_DB", "airac.db")

    # In production, ensure database is in a safe location
    if ENVIRONMENT == "production":
        allowed_dir = "/var/lib/airac-sync"
        if not db_path.startswith(allowed_dir):
            db_path = f"{allowed_dir}/airac.db"

    return db_path
