import logging
import os
import sys

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from brokerage.config import settings
from brokerage.database import init_db
from brokerage.api import listings, content, inquiries

# Configure logging so all loggers output to console
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    stream=sys.stdout,
)
logging.getLogger("brokerage").setLevel(logging.DEBUG)

if settings.log_file:
    log_dir = os.path.dirname(settings.log_file)
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
    file_handler = logging.FileHandler(settings.log_file, encoding="utf-8")
    file_handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s [%(name)s] %(message)s"))
    logging.getLogger().addHandler(file_handler)

app = FastAPI(
    title="Luxury Brokerage API",
    description="Listings, filtering and pagination for buy, rent, off-plan and project pages",
    version="1.0.0",
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routers
app.include_router(listings.router, prefix="/api/listings", tags=["Listings"])
app.include_router(content.router, prefix="/api", tags=["Content"])
app.include_router(inquiries.router, prefix="/api", tags=["Inquiries"])


@app.on_event("startup")
async def startup_event():
    """Initialize database tables."""
    init_db()
    if not settings.sanity_project_id:
        logging.getLogger(__name__).warning("SANITY_PROJECT_ID is not set; listing pages will be empty")


@app.get("/api/health")
async def health_check():
    return {"status": "healthy", "version": "1.0.0"}
