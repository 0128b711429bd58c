import os

# Keep the module-level engine off the local SQLite file while tests import the app.
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
