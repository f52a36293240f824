"""
Refresh the currency_rates table from the exchange rate API.

Meant for a scheduler (cron, CI job); the API itself never calls out for rates.
"""
import logging
import sys
import os

# Add the backend directory to Python path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from together.db.session import SessionLocal
from together.repositories.sql import SqlRateRepository
from together.services.fx_service import refresh_rates

if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s [%(name)s] %(message)s")
    currencies = sys.argv[1:] or None
    db = SessionLocal()
    try:
        updated = refresh_rates(SqlRateRepository(db), currencies)
    finally:
        db.close()
    print(f"Upserted {updated} currency rate pairs")
    if updated == 0:
        sys.exit(1)
