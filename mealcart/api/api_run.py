from fastapi import FastAPI
import logging

from mealcart.api.routes import library, plan, shopping, notifications
from mealcart.events.web_observers import start as start_event_observers
from mealcart.utilities.constants import REFERENCE_HOUSEHOLD_SIZE

# Logging
logger = logging.getLogger("mealcart_app")

# Initialize FastAPI app
app = FastAPI(title="Mealcart Meal Planner & Grocery API")

# Include routers
app.include_router(library.router)
app.include_router(plan.router)
app.include_router(shopping.router)
app.include_router(notifications.router)


@app.on_event("startup")
def _startup_web_observers():
    """Register event bus subscribers for web notifications when the app starts."""
    start_event_observers()
    logger.info("Notification observers started")


@app.get('/api/health')
def health():
    return {"status": "ok", "reference_household_size": REFERENCE_HOUSEHOLD_SIZE}
