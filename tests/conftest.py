"""Shared test configuration.

Points the application at a throwaway SQLite database before any
powersplit module (and therefore the settings) is imported.
"""

import os
import tempfile
from pathlib import Path

_TEST_DB_DIR = Path(tempfile.mkdtemp(prefix="powersplit-tests-"))
os.environ["DATABASE_URL"] = f"sqlite:///{_TEST_DB_DIR / 'test.db'}"
