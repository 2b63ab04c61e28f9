from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import cv2
from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import Response

from models.detection import confidence_tier
from models.status import ControllerState
from observation.image_source import find_demo_image, list_demo_images
from runtime.context import RuntimeContext
from runtime.status_board import StatusBoard
from ..api_models import DemoImagesResponse, IntentResponse, StatusResponse, VisibilityRequest

router = APIRouter()

MAX_UPLOAD_BYTES = 20 * 1024 * 1024


def _ctx(request: Request) -> RuntimeContext:
    return request.app.state.ctx


def _message_payload(board: StatusBoard) -> Optional[Dict[str, Any]]:
    message = board.current_message()
    return message.to_dict() if message is not None else None


def _status_payload(board: StatusBoard, state: ControllerState) -> Dict[str, Any]:
    """
    Build the /api/status body from the board.
    Results are already sorted most-confident first.
    """
    return {
        "state": state.value,
        "camera_active": state.camera_active,
        "realtime": state == ControllerState.CAMERA_REALTIME,
        "metrics": board.metrics.to_dict(),
        "results": [
            {
                "label": det.label,
                "confidence": det.confidence,
                "percent": det.percent,
                "tier": confidence_tier(det.confidence),
                "class_id": det.class_id,
                "bbox": list(det.bbox.as_tuple()),
            }
            for det in board.results
        ],
        "message": _message_payload(board),
        "file_info": board.file_info,
    }


def _intent_payload(ctx: RuntimeContext, ok: bool) -> Dict[str, Any]:
    return {
        "ok": ok,
        "state": ctx.controller.state.value,
        "message": _message_payload(ctx.board),
    }


@router.get("/status", response_model=StatusResponse)
def status(request: Request):
    ctx = _ctx(request)
    return _status_payload(ctx.board, ctx.controller.state)


@router.post("/camera/start", response_model=IntentResponse)
async def start_camera(request: Request):
    ctx = _ctx(request)
    ok = await ctx.controller.start_capture()
    return _intent_payload(ctx, ok)


@router.post("/camera/stop", response_model=IntentResponse)
async def stop_camera(request: Request):
    ctx = _ctx(request)
    await ctx.controller.stop_capture()
    return _intent_payload(ctx, True)


@router.post("/realtime/toggle", response_model=IntentResponse)
async def toggle_realtime(request: Request):
    ctx = _ctx(request)
    await ctx.controller.toggle_realtime()
    return _intent_payload(ctx, ctx.controller.state.camera_active)


@router.post("/detect", response_model=IntentResponse)
async def detect(request: Request):
    ctx = _ctx(request)
    result = await ctx.controller.run_single_pass()
    return _intent_payload(ctx, result is not None)


@router.post("/image", response_model=IntentResponse)
async def upload_image(request: Request):
    """Body is the raw encoded image; the filename comes from X-Filename."""
    ctx = _ctx(request)
    data = await request.body()
    if len(data) > MAX_UPLOAD_BYTES:
        raise HTTPException(status_code=413, detail="Image too large")
    filename = request.headers.get("x-filename", "upload")
    result = await ctx.controller.load_image(data, filename)
    return _intent_payload(ctx, result is not None)


@router.get("/demo", response_model=DemoImagesResponse)
def demo_images(request: Request):
    return {"images": list_demo_images(_ctx(request).config.demo.images_dir)}


@router.post("/demo/{name}", response_model=IntentResponse)
async def load_demo(request: Request, name: str):
    ctx = _ctx(request)
    if find_demo_image(ctx.config.demo.images_dir, name) is None:
        raise HTTPException(status_code=404, detail=f"Unknown demo image: {name}")
    result = await ctx.controller.load_demo_image(name)
    return _intent_payload(ctx, result is not None)


@router.post("/visibility", response_model=IntentResponse)
async def visibility(request: Request, body: VisibilityRequest):
    ctx = _ctx(request)
    await ctx.controller.set_visibility(body.hidden)
    return _intent_payload(ctx, True)


@router.get("/frame.jpg")
def frame_jpeg(request: Request):
    frame = _ctx(request).latest_frame()
    if frame is None:
        raise HTTPException(status_code=404, detail="No frame rendered yet")
    ok, buf = cv2.imencode(".jpg", frame)
    if not ok:
        logging.error("JPEG encoding failed")
        raise HTTPException(status_code=500, detail="Encoding failed")
    return Response(content=buf.tobytes(), media_type="image/jpeg")
