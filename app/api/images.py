from __future__ import annotations

from pathlib import Path

from fastapi import APIRouter, Depends
from fastapi.responses import FileResponse, JSONResponse, Response

from app.api.deps import get_app_settings
from app.config import Settings

router = APIRouter(tags=["images"])


@router.get("/images/{name}")
async def get_image(name: str, settings: Settings = Depends(get_app_settings)) -> Response:
    # Basename only; no traversal out of the images directory.
    safe_name = Path(name).name
    path = settings.images_path / safe_name
    if not safe_name or not path.is_file():
        return JSONResponse(status_code=404, content={"error": "Image not found"})
    return FileResponse(path)
