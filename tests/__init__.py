"""Test package. Env defaults are set before any juice module reads settings."""

import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
# Low bcrypt cost keeps password hashing fast in tests.
os.environ.setdefault("BCRYPT_ROUNDS", "4")
