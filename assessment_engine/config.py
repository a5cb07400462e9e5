"""
Assessment Engine Configuration

All settings are read from the environment once at import time.
"""

import os

# Persistence backend: memory | json | postgres
ASSESSMENT_STORE = os.getenv("ASSESSMENT_STORE", "memory").strip().lower()
ASSESSMENT_DATA_PATH = os.getenv("ASSESSMENT_DATA_PATH", "data/assessment_state.json")
DATABASE_URL = os.getenv("DATABASE_URL")

# Install the built-in health & fitness and cardiac templates on an empty store
SEED_TEMPLATES = os.getenv("SEED_TEMPLATES", "true").lower() == "true"

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv("CORS_ORIGINS", "*").split(",")
    if origin.strip()
]

API_VERSION = "1.0.0"
