import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from shared.core.config import settings
from shared.core.database import fabrication_engine, Base
from shared.helpers.exception_handler import setup_exception_handlers
from shared.wrappers.response_wrapper import JsonResponseMiddleware

from .models.inventory import bom_templates, stock_items, stock_movements, stock_reservations
from .models.procurement import purchase_orders
from .models.production import orders, warranties, work_orders
from .models.sales import leads, quotes, visits
from .router.inventory import bom_templates_router, stock_items_router
from .router.procurement import purchase_orders_router
from .router.production import orders_router, warranties_router, work_orders_router
from .router.sales import leads_router, quotes_router, visits_router

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(title="Fabrication Service API")

# Create all tables
Base.metadata.create_all(bind=fabrication_engine)

# Allow requests from the React app
origins = [
    "http://localhost:8080",
    "http://127.0.0.1:8003"
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(JsonResponseMiddleware)
setup_exception_handlers(app)

# Include routers
app.include_router(stock_items_router.router)
app.include_router(bom_templates_router.router)
app.include_router(leads_router.router)
app.include_router(visits_router.router)
app.include_router(quotes_router.router)
app.include_router(orders_router.router)
app.include_router(work_orders_router.router)
app.include_router(warranties_router.router)
app.include_router(purchase_orders_router.router)


@app.get("/health")
def health_check():
    return {"status": "ok", "service": "fabrication"}
