"""FastAPI application."""
from fastapi import FastAPI

from workflow_service.api.routes import boards, health, nodes, templates
from workflow_service.observability import setup_logging

# Setup logging
setup_logging()

# Create FastAPI app
app = FastAPI(
    title="Workflow Engine",
    description="Board compilation, node execution and template preview",
    version="0.1.0",
)

# Include routers
app.include_router(health.router, tags=["health"])
app.include_router(boards.router, tags=["boards"])
app.include_router(nodes.router, tags=["nodes"])
app.include_router(templates.router, tags=["templates"])


@app.get("/")
def root() -> dict:
    """Root endpoint."""
    return {
        "service": "workflow-engine",
        "version": "0.1.0",
        "docs": "/docs",
    }
