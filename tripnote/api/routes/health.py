"""Health check endpoint."""

from fastapi import APIRouter

from tripnote import __version__

router = APIRouter()


@router.get("/health")
async def health():
    return {"status": "ok", "service": "tripnote", "version": __version__}


@router.get("/")
async def root():
    return {"service": "tripnote", "version": __version__}
