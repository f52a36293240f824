"""
Apply pending schema migrations. Run once per deploy.
"""
import logging
import sys
import os

# Add the backend directory to Python path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from together.db.migrate import run_migrations

if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s [%(name)s] %(message)s")
    try:
        applied = run_migrations()
    except Exception:
        logging.getLogger(__name__).exception("Migration failed")
        sys.exit(1)
    print(f"Applied migrations: {', '.join(applied)}" if applied else "Schema is up to date")
