"""Test setup: point the app at a throwaway SQLite database before it is imported."""

import os
import tempfile

_DB_DIR = tempfile.mkdtemp(prefix="lptagger-tests-")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{os.path.join(_DB_DIR, 'test.db')}"
os.environ["APP_ENV"] = "production"
os.environ.pop("STATIC_DIR", None)
os.environ.pop("DEPLOYED", None)
os.environ.pop("VERCEL", None)
