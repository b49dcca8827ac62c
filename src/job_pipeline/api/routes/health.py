"""Health check endpoint."""

import httpx
from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from job_pipeline.errors import AirtableError

router = APIRouter()


@router.get("/health")
async def health(request: Request):
    """Check that the record store answers."""
    try:
        await request.app.state.repository.verify_connectivity()
    except (AirtableError, httpx.HTTPError):
        return JSONResponse(status_code=503, content={"status": "unhealthy"})
    return {"status": "ok"}
