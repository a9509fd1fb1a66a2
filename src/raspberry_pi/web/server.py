"""
Web server - aiohttp application for debug interface.
"""

from __future__ import annotations

import asyncio
import logging

import cv2
from aiohttp import web

from config import MARKER_COLORS, WEB_HOST, WEB_PORT

logger = logging.getLogger(__name__)

INDEX_HTML = """<!DOCTYPE html>
<html>
<head><title>Rover Debug</title></head>
<body>
    <h1>Rover Debug Interface</h1>
    <img src="/stream/camera" width="640">
    <pre id="status"></pre>
    <script>
        async function poll() {
            const r = await fetch("/api/status");
            document.getElementById("status").textContent =
                JSON.stringify(await r.json(), null, 2);
        }
        setInterval(poll, 500);
    </script>
</body>
</html>
"""


class WebServer:
    """
    Debug web interface server.

    Provides:
    - Dashboard page
    - Controller status (mode, last positions, actuators)
    - Parameter tuning
    - Camera stream (MJPEG) with marker boxes, and per-color masks
    """

    def __init__(self, controller=None, frame_interval: float = 0.1):
        """
        Args:
            controller: Optional Controller instance for live data
            frame_interval: Seconds between MJPEG frames
        """
        self.controller = controller
        self.frame_interval = frame_interval
        self.app = web.Application()
        self._setup_routes()

    def _setup_routes(self):
        """Configure routes."""
        self.app.router.add_get("/", self.index)

        # API
        self.app.router.add_get("/api/status", self.api_status)
        self.app.router.add_get("/api/params", self.api_params_get)
        self.app.router.add_post("/api/params", self.api_params_set)

        # Streams
        self.app.router.add_get("/stream/camera", self.stream_camera)
        self.app.router.add_get("/stream/camera/{color}", self.stream_camera_mask)

    async def index(self, request):
        """Dashboard page."""
        return web.Response(text=INDEX_HTML, content_type="text/html")

    async def api_status(self, request):
        """Get current controller status."""
        status = {
            "mode": "unknown",
            "steps": 0,
            "car": None,
            "target": None,
            "speed": 0,
            "steering": 90,
        }

        if self.controller:
            status["mode"] = self.controller.mode.name
            status["steps"] = self.controller.steps
            status["speed"] = self.controller.link.speed
            status["steering"] = self.controller.link.steering
            last = self.controller.last_map
            if last is not None:
                status["car"] = [last.car.x, last.car.y]
                status["target"] = [last.target.x, last.target.y]

        return web.json_response(status)

    async def api_params_get(self, request):
        """Get current tunable parameters."""
        if self.controller and self.controller.params:
            return web.json_response(self.controller.params.to_dict())
        return web.json_response({"error": "Parameters not available"}, status=404)

    async def api_params_set(self, request):
        """Update tunable parameters. Include _save=true to persist to disk."""
        if not self.controller or not self.controller.params:
            return web.json_response({"error": "Parameters not available"}, status=404)

        data = await request.json()
        save = data.pop("_save", False)
        self.controller.params.update(**data)

        if save:
            self.controller.params.save()

        return web.json_response(self.controller.params.to_dict())

    async def stream_camera(self, request):
        """MJPEG stream of the latest control frame with marker boxes."""
        if not self.controller:
            return web.Response(status=404, text="Camera not available")

        response = await self._start_mjpeg(request)
        try:
            while True:
                jpeg = await asyncio.to_thread(self._render_frame)
                if jpeg:
                    await self._write_part(response, jpeg)
                await asyncio.sleep(self.frame_interval)
        except (ConnectionResetError, ConnectionAbortedError):
            pass

        return response

    async def stream_camera_mask(self, request):
        """MJPEG stream of one color mask (red, green)."""
        color = request.match_info["color"]
        if color not in MARKER_COLORS:
            return web.Response(status=404, text="Unknown color")
        if not self.controller:
            return web.Response(status=404, text="Camera not available")

        response = await self._start_mjpeg(request)
        try:
            while True:
                jpeg = await asyncio.to_thread(self._render_mask, color)
                if jpeg:
                    await self._write_part(response, jpeg)
                await asyncio.sleep(self.frame_interval)
        except (ConnectionResetError, ConnectionAbortedError):
            pass

        return response

    # Detection and encoding are CPU-bound; the stream handlers run these
    # in a worker thread so the control loop keeps the event loop.

    def _render_frame(self) -> bytes | None:
        """Latest frame as JPEG with marker boxes, or None."""
        frame = self.controller.camera.get_frame()
        if frame is None:
            return None
        markers = self.controller.detector.detect(frame)
        return self.controller.camera.get_jpeg_frame(markers)

    def _render_mask(self, color: str) -> bytes | None:
        """Latest frame's color mask as JPEG, or None."""
        frame = self.controller.camera.get_frame()
        if frame is None:
            return None
        mask = self.controller.detector.mask(frame, color)
        ret, jpeg = cv2.imencode(".jpg", mask)
        if not ret:
            return None
        return jpeg.tobytes()

    @staticmethod
    async def _start_mjpeg(request) -> web.StreamResponse:
        response = web.StreamResponse()
        response.content_type = "multipart/x-mixed-replace; boundary=frame"
        await response.prepare(request)
        return response

    @staticmethod
    async def _write_part(response: web.StreamResponse, jpeg: bytes):
        await response.write(
            b"--frame\r\n"
            b"Content-Type: image/jpeg\r\n\r\n"
            + jpeg
            + b"\r\n"
        )


def create_app(controller=None) -> web.Application:
    """Create the web application."""
    server = WebServer(controller)
    return server.app


async def run_server(controller=None, host=WEB_HOST, port=WEB_PORT):
    """Run the web server."""
    app = create_app(controller)
    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, host, port)
    await site.start()
    logger.info(f"Web server running at http://{host}:{port}")
    return runner
