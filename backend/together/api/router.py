"""
Main API router that includes all route modules.
"""
from fastapi import APIRouter
from together.api.routes import auth, users, persons, finance, currency_rates

api_router = APIRouter()

# Include all route modules
api_router.include_router(auth.router)
api_router.include_router(users.router)
api_router.include_router(persons.router)
api_router.include_router(finance.router)
api_router.include_router(currency_rates.router)
