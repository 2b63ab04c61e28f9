"""
Loop controller: camera lifecycle, single-shot and realtime detection.

States:
    IDLE             no frame source
    CAMERA_SINGLE    camera open, passes run on request
    CAMERA_REALTIME  camera open, a tick runs a pass and reschedules itself
    IMAGE_LOADED     a decoded still image is the frame source

Only one detection pass is ever in flight. The realtime tick reschedules only
after its pass completes, and every pass holds the pass lock. Leaving
realtime bumps a generation counter so a tick scheduled for an earlier
session returns without running and a pass still in flight from it
publishes nothing.
"""

from __future__ import annotations

import asyncio
import logging
import os
from pathlib import Path
from typing import Any, Callable, Optional

from models.config import Config
from models.status import ControllerState, MessageLevel, PassResult
from observation.base import CaptureError, ObservationSource
from observation.image_source import ImageDecodeError, ImageSource, decode_image_async, find_demo_image
from observation.opencv_source import CameraSource, CameraSourceConfig
from pipeline.engine import DetectionPipeline
from pipeline.fps import FpsMeter
from .scheduler import AsyncioTicker, Ticker
from .status_board import StatusBoard


class LoopController:
    """
    Owns the frame source and drives the detection pipeline.

    Intents (start_capture, stop_capture, toggle_realtime, run_single_pass,
    load_image, load_demo_image, set_visibility) are plain async methods;
    outcomes are written to the StatusBoard.
    """

    def __init__(
        self,
        pipeline: DetectionPipeline,
        camera_factory: Callable[[], ObservationSource],
        ticker: Ticker,
        board: StatusBoard,
        fps_meter: Optional[FpsMeter] = None,
        demo_images_dir: Optional[str] = None,
    ):
        self._pipeline = pipeline
        self._camera_factory = camera_factory
        self._ticker = ticker
        self._board = board
        self._fps = fps_meter or FpsMeter()
        self._demo_images_dir = demo_images_dir
        self._state = ControllerState.IDLE
        self._camera: Optional[ObservationSource] = None
        self._image: Optional[ImageSource] = None
        self._tick_handle: Any = None
        self._generation = 0
        self._pass_lock = asyncio.Lock()
        self._board.set_model_status(pipeline.model_status)

    @property
    def state(self) -> ControllerState:
        return self._state

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def fps(self) -> int:
        return self._fps.fps

    def _set_state(self, state: ControllerState) -> None:
        if state != self._state:
            logging.info(f"Controller state: {self._state.value} -> {state.value}")
        self._state = state
        self._board.set_state(state)

    # Intents

    async def start_capture(self) -> bool:
        """Open the camera. Returns True when the camera is active afterwards."""
        if self._state.camera_active:
            self._board.publish_message("Camera is already running", MessageLevel.WARNING)
            return True

        self._board.publish_message("Starting camera...")
        camera = self._camera_factory()
        try:
            await asyncio.to_thread(camera.open)
        except CaptureError as e:
            logging.error(f"Camera error ({e.reason.value}): {e.detail}")
            self._board.publish_message(e.user_message, MessageLevel.ERROR)
            return False

        self._release_image()
        self._camera = camera
        self._set_state(ControllerState.CAMERA_SINGLE)
        self._board.publish_message("Camera started successfully!", MessageLevel.SUCCESS)
        return True

    async def stop_capture(self) -> None:
        """Cancel any pending tick and release the camera."""
        self._cancel_tick()
        # Wait for an in-flight pass; its generation is stale so it publishes nothing.
        async with self._pass_lock:
            if self._camera is not None:
                self._camera.close()
                self._camera = None
        if self._state.camera_active:
            self._set_state(ControllerState.IDLE)
            self._board.clear_frame()
            self._board.publish_message("Camera stopped")

    async def toggle_realtime(self) -> bool:
        """Switch between single and realtime detection. Returns the realtime flag."""
        if self._state == ControllerState.CAMERA_SINGLE:
            self._set_state(ControllerState.CAMERA_REALTIME)
            self._fps.reset()
            self._schedule_tick()
            self._board.publish_message("Real-time detection started!", MessageLevel.SUCCESS)
            return True

        if self._state == ControllerState.CAMERA_REALTIME:
            self._cancel_tick()
            self._set_state(ControllerState.CAMERA_SINGLE)
            self._board.publish_message("Real-time detection stopped")
            return False

        self._board.publish_message("Start the camera to use real-time detection", MessageLevel.WARNING)
        return False

    async def run_single_pass(self) -> Optional[PassResult]:
        """Run one detection pass on the current frame source."""
        source = self._current_source()
        if source is None:
            self._board.publish_message("Please start camera or upload an image first", MessageLevel.WARNING)
            return None
        return await self._run_pass(source, self._generation, realtime=False)

    async def load_image(
        self, data: bytes, filename: str = "upload", file_info: Optional[str] = None
    ) -> Optional[PassResult]:
        """Decode an uploaded image, make it the frame source and detect once."""
        self._board.publish_message("Loading image...")
        try:
            frame = await decode_image_async(data, filename)
        except ImageDecodeError as e:
            logging.error(f"Image decode failed: {e}")
            self._board.publish_message("Could not read image file", MessageLevel.ERROR)
            return None

        if self._state.camera_active:
            await self.stop_capture()

        self._release_image()
        self._image = ImageSource.from_frame(frame, filename)
        self._set_state(ControllerState.IMAGE_LOADED)
        self._board.set_file_info(file_info or f"File: {filename}")
        return await self.run_single_pass()

    async def load_demo_image(self, name: str) -> Optional[PassResult]:
        """Load one of the bundled demo images and detect once."""
        path = find_demo_image(self._demo_images_dir, name) if self._demo_images_dir else None
        if path is None:
            logging.warning(f"Demo image not found: {name!r} in {self._demo_images_dir}")
            self._board.publish_message("Demo image not available", MessageLevel.ERROR)
            return None

        self._board.publish_message("Loading demo image...")
        data = await asyncio.to_thread(Path(path).read_bytes)
        return await self.load_image(data, os.path.basename(path), file_info="Demo image loaded")

    async def set_visibility(self, hidden: bool) -> None:
        """A hidden page stops the camera."""
        if hidden and self._state.camera_active:
            logging.info("Page hidden, stopping camera")
            await self.stop_capture()

    async def shutdown(self) -> None:
        await self.stop_capture()
        self._release_image()
        self._set_state(ControllerState.IDLE)

    # Internals

    def _current_source(self) -> Optional[ObservationSource]:
        if self._state.camera_active:
            return self._camera
        if self._state == ControllerState.IMAGE_LOADED:
            return self._image
        return None

    def _release_image(self) -> None:
        if self._image is not None:
            self._image.close()
            self._image = None
            self._board.set_file_info(None)

    async def _run_pass(
        self, source: ObservationSource, generation: int, realtime: bool
    ) -> Optional[PassResult]:
        """
        Run one pass for the session identified by generation.

        A pass whose session ended while it ran (stop, upload, realtime off)
        returns None and leaves the board untouched.
        """
        async with self._pass_lock:
            if generation != self._generation:
                return None
            try:
                frame = await asyncio.to_thread(source.read)
                if frame is None:
                    self._board.publish_message("No frame available", MessageLevel.WARNING)
                    return None
                result = await self._pipeline.run_pass(frame)
            except Exception as e:
                logging.exception(f"Detection error: {e}")
                self._board.publish_message("Detection failed", MessageLevel.ERROR)
                return None

        if generation != self._generation:
            logging.debug("Dropping result of a pass from an ended session")
            return None
        if realtime:
            self._fps.tick()
        result.metrics.set_rate(self._fps.fps, realtime)
        self._board.publish_result(result)
        return result

    def _schedule_tick(self) -> None:
        generation = self._generation

        async def tick() -> None:
            await self._realtime_tick(generation)

        self._tick_handle = self._ticker.schedule(tick)

    async def _realtime_tick(self, generation: int) -> None:
        if generation != self._generation or self._state != ControllerState.CAMERA_REALTIME:
            return
        self._tick_handle = None
        await self._run_pass(self._camera, generation, realtime=True)
        if generation == self._generation and self._state == ControllerState.CAMERA_REALTIME:
            self._schedule_tick()

    def _cancel_tick(self) -> None:
        self._generation += 1
        if self._tick_handle is not None:
            self._ticker.cancel(self._tick_handle)
            self._tick_handle = None


def create_controller_from_config(
    config: Config,
    pipeline: DetectionPipeline,
    board: StatusBoard,
) -> LoopController:
    """
    Factory function wiring a LoopController from the typed config.
    """
    camera_cfg = CameraSourceConfig.from_camera_config(config.camera.to_dict(), source_id="webcam")
    ticker = AsyncioTicker(interval_s=config.loop.tick_interval_ms / 1000.0)
    return LoopController(
        pipeline=pipeline,
        camera_factory=lambda: CameraSource(camera_cfg),
        ticker=ticker,
        board=board,
        demo_images_dir=config.demo.images_dir,
    )
