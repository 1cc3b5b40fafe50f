"""
StorageGRID Bucket Manager — FastAPI application entry point.

This module initializes the FastAPI application that declares and
reconciles StorageGRID buckets, their object-lock configuration and their
access policies. It configures logging and CORS, connects to MongoDB
(where grid connection profiles are stored), and registers all API routes.
"""

import logging
import os

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from app.routes import bucket_policies_routes, buckets_routes, grids_routes
from app.db.client import init_mongo

load_dotenv()

# ------------------------------------------------------------------------------
# Logging
# ------------------------------------------------------------------------------

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

# ------------------------------------------------------------------------------
# Application initialization
# ------------------------------------------------------------------------------

app = FastAPI(
    title="StorageGRID Bucket Manager",
    description="API to manage StorageGRID buckets, object-lock settings and bucket policies",
    version="0.1.0"
)

# ------------------------------------------------------------------------------
# Middleware configuration
# ------------------------------------------------------------------------------

# CORS middleware: allows cross-origin requests.
# Adjust 'allow_origins' for production deployment.
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ------------------------------------------------------------------------------
# Application startup events
# ------------------------------------------------------------------------------

@app.on_event("startup")
async def startup_db():
    """
    Initialize the MongoDB client on application startup.

    This ensures that the database connection is ready before handling requests.
    """
    await init_mongo()

# ------------------------------------------------------------------------------
# API routes registration
# ------------------------------------------------------------------------------

app.include_router(grids_routes.router, prefix="/grids", tags=["Grids"])
app.include_router(buckets_routes.router, prefix="/buckets", tags=["Buckets"])
app.include_router(bucket_policies_routes.router, prefix="/bucket-policies", tags=["Bucket policies"])
