import os

# Keep the import-time application off real services during tests
os.environ.setdefault("LEDGER_DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("REDIS_URL", "redis://localhost:6379/15")
os.environ.setdefault("LOG_SAMPLE_2XX", "1")
