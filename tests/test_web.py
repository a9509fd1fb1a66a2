import asyncio
import threading
from types import SimpleNamespace

import numpy as np
from aiohttp import test_utils

from decision import NavigationMode
from params import Parameters
from perception import MapState, MarkerDetector, Position
from web import create_app


def make_controller(last_map=None):
    return SimpleNamespace(
        mode=NavigationMode.APPROACHING,
        steps=7,
        last_map=last_map,
        link=SimpleNamespace(speed=40, steering=90),
        params=Parameters(),
    )


def request(controller, method, path, **kwargs):
    async def go():
        async with test_utils.TestClient(test_utils.TestServer(create_app(controller))) as client:
            resp = await client.request(method, path, **kwargs)
            if resp.content_type == "application/json":
                body = await resp.json()
            elif resp.content_type.startswith("text/"):
                body = await resp.text()
            else:
                body = await resp.read()
            return resp.status, body

    return asyncio.run(go())


def test_status_reports_mode_and_positions():
    controller = make_controller(MapState(Position(1, 2), Position(30, 40)))

    status, body = request(controller, "GET", "/api/status")

    assert status == 200
    assert body["mode"] == "APPROACHING"
    assert body["steps"] == 7
    assert body["car"] == [1, 2]
    assert body["target"] == [30, 40]
    assert body["speed"] == 40


def test_status_without_controller():
    status, body = request(None, "GET", "/api/status")

    assert status == 200
    assert body["mode"] == "unknown"
    assert body["car"] is None


def test_params_roundtrip():
    controller = make_controller()

    status, body = request(controller, "POST", "/api/params", json={"drive_speed": 55})

    assert status == 200
    assert body["drive_speed"] == 55
    assert controller.params.drive_speed == 55

    status, body = request(controller, "GET", "/api/params")
    assert body["drive_speed"] == 55


def test_params_unavailable():
    status, _ = request(None, "GET", "/api/params")
    assert status == 404


def test_unknown_mask_color():
    status, _ = request(make_controller(), "GET", "/stream/camera/blue")
    assert status == 404


def test_index_page():
    status, body = request(None, "GET", "/")
    assert status == 200
    assert "/stream/camera" in body


class OneFrameCamera:
    """Serves one frame, then behaves like a dropped client."""

    def __init__(self):
        self.calls = 0

    def get_frame(self):
        self.calls += 1
        if self.calls > 1:
            raise ConnectionResetError()
        return np.zeros((48, 64, 3), np.uint8)

    def get_jpeg_frame(self, markers):
        return b"jpeg-bytes"


class ThreadRecordingDetector(MarkerDetector):
    def __init__(self):
        super().__init__(Parameters())
        self.threads = []

    def detect(self, frame):
        self.threads.append(threading.current_thread())
        return super().detect(frame)


def streaming_controller():
    controller = make_controller()
    controller.camera = OneFrameCamera()
    controller.detector = ThreadRecordingDetector()
    return controller


def test_camera_stream_detects_off_the_event_loop():
    controller = streaming_controller()

    status, body = request(controller, "GET", "/stream/camera")

    assert status == 200
    assert b"--frame" in body
    assert b"jpeg-bytes" in body
    assert controller.detector.threads
    assert threading.main_thread() not in controller.detector.threads


def test_mask_stream_sends_frame():
    status, body = request(streaming_controller(), "GET", "/stream/camera/green")

    assert status == 200
    assert b"--frame" in body
