import os

# Settings are read at import time; keep tests off a real Postgres.
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("APP_ENV", "dev")
