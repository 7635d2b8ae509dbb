import os
import tempfile
from pathlib import Path

# Must run before courtbook.config is imported; main.py creates tables on import.
TEST_DB_DIR = Path(tempfile.mkdtemp(prefix="courtbook-tests-"))
os.environ["DATABASE_URL"] = f"sqlite:///{TEST_DB_DIR / 'courtbook.db'}"
