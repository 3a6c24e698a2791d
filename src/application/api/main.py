"""Main FastAPI application entry point."""

import logging

from fastapi import Depends, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from composition_root import configure_logging
from domain.errors import StoreAccessError
from domain.kg_backends import OntologyGraphBackend
from .dependencies import get_backend, shutdown_dependencies
from .individuals_router import router as individuals_router

configure_logging()
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Ontology Individuals API",
    description="Validation and instantiation of ontology individuals in the knowledge graph",
    version="1.0.0"
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(individuals_router)


@app.on_event("shutdown")
async def shutdown_event():
    """Release the graph store connection."""
    logger.info("Shutting down Ontology Individuals API...")
    await shutdown_dependencies()


@app.get("/api/ping")
async def ping(backend: OntologyGraphBackend = Depends(get_backend)):
    """Check that the graph store answers."""
    try:
        ok = await backend.ping()
    except StoreAccessError as e:
        raise HTTPException(status_code=503, detail=str(e))
    return {"status": "ok" if ok else "unavailable"}
