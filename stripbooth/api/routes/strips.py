from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import FileResponse

from stripbooth.api.dependencies import get_exporter
from stripbooth.services.exporter import Exporter

router = APIRouter(prefix="/strips", tags=["strips"])


@router.get("/{filename}")
async def download_strip(filename: str, exporter: Exporter = Depends(get_exporter)):
    filepath = exporter.resolve(filename)
    if filepath is None:
        raise HTTPException(status_code=404, detail="Strip not found")

    return FileResponse(filepath, media_type="image/png", filename=filename)


@router.get("/")
async def list_strips(exporter: Exporter = Depends(get_exporter)):
    return {"strips": exporter.list_exports()}
