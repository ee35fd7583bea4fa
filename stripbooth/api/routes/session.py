import base64
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException

from stripbooth.api.dependencies import get_booth_session
from stripbooth.exceptions import (
    CameraUnavailableError, CaptureSourceUnavailableError, DecodeError,
    ExportPreconditionError, SlotIndexError
)
from stripbooth.models.booth import (
    BoothSettingsRequest, BoothStatusResponse, CaptureResponse, ExportRequest, ExportResponse
)
from stripbooth.services.session import BoothSession

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/session", tags=["session"])


def _encode(data: bytes) -> str:
    return base64.b64encode(data).decode("utf-8")


def _status(booth: BoothSession) -> BoothStatusResponse:
    return BoothStatusResponse(
        stage=booth.stage,
        template=booth.template,
        filter=booth.filter,
        flipped=booth.flipped,
        border_color=booth.border_color,
        pattern=booth.pattern,
        slot_count=len(booth.slots),
        empty_slots=booth.slots.empty_count(),
        slots=[_encode(bitmap.png) if bitmap else None for bitmap in booth.slots.snapshot()]
    )


@router.post("/start", response_model=BoothStatusResponse)
async def start_session(booth: BoothSession = Depends(get_booth_session)):
    async with booth.lock:
        try:
            booth.start()
        except CameraUnavailableError as e:
            raise HTTPException(status_code=503, detail=str(e))
        return _status(booth)


@router.post("/stop", response_model=BoothStatusResponse)
async def stop_session(booth: BoothSession = Depends(get_booth_session)):
    async with booth.lock:
        booth.stop()
        return _status(booth)


@router.get("/status", response_model=BoothStatusResponse)
async def get_session_status(booth: BoothSession = Depends(get_booth_session)):
    return _status(booth)


@router.patch("/settings", response_model=BoothStatusResponse)
async def update_settings(
        request: BoothSettingsRequest,
        booth: BoothSession = Depends(get_booth_session)
):
    async with booth.lock:
        if request.template is not None:
            booth.select_template(request.template)
        if request.filter is not None:
            booth.select_filter(request.filter)
        if request.flipped is not None:
            booth.set_flip(request.flipped)
        if request.border_color is not None:
            booth.set_border_color(request.border_color)
        if request.pattern is not None:
            booth.select_pattern(request.pattern)
        return _status(booth)


@router.post("/flip", response_model=BoothStatusResponse)
async def toggle_flip(booth: BoothSession = Depends(get_booth_session)):
    async with booth.lock:
        booth.toggle_flip()
        return _status(booth)


@router.post("/capture", response_model=CaptureResponse)
async def capture_photo(booth: BoothSession = Depends(get_booth_session)):
    async with booth.lock:
        try:
            result = booth.capture()
        except CaptureSourceUnavailableError as e:
            raise HTTPException(status_code=503, detail=str(e))

        return CaptureResponse(
            captured=result.captured,
            index=result.index,
            empty_slots=booth.slots.empty_count(),
            photo=_encode(result.bitmap.png) if result.bitmap else None
        )


@router.delete("/slots/{index}", response_model=BoothStatusResponse)
async def clear_slot(index: int, booth: BoothSession = Depends(get_booth_session)):
    async with booth.lock:
        try:
            booth.clear(index)
        except SlotIndexError as e:
            raise HTTPException(status_code=404, detail=str(e))
        return _status(booth)


@router.delete("/slots", response_model=BoothStatusResponse)
async def clear_all_slots(booth: BoothSession = Depends(get_booth_session)):
    async with booth.lock:
        booth.clear_all()
        return _status(booth)


@router.post("/export", response_model=ExportResponse)
async def export_strip(
        request: Optional[ExportRequest] = None,
        booth: BoothSession = Depends(get_booth_session)
):
    portrait = request.portrait if request is not None else None
    async with booth.lock:
        try:
            result = await booth.export(portrait)
        except ExportPreconditionError as e:
            raise HTTPException(status_code=400, detail=str(e))
        except DecodeError as e:
            logger.error("Export failed: %s", e)
            raise HTTPException(status_code=500, detail=str(e))
        except OSError as e:
            logger.error("Could not save strip: %s", e)
            raise HTTPException(status_code=500, detail="Strip could not be saved")

    return ExportResponse(
        success=True,
        filename=result.filename,
        download_url=f"/api/strips/{result.filename}",
        strip=_encode(result.data)
    )
