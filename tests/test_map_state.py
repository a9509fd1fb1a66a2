import asyncio

import cv2
import numpy as np
import pytest

from conftest import FakeCamera
from errors import DetectionFailure
from params import Parameters
from perception import MapState, MarkerDetector, Position, TeamColors


def test_infer_returns_both_positions(detector):
    camera = FakeCamera([((10, 20), (300, 40))])

    state = asyncio.run(MapState.infer(camera, detector))

    assert state.car == Position(10, 20)
    assert state.target == Position(300, 40)
    assert camera.snapshots == 1


def test_distance():
    state = MapState(Position(0, 0), Position(30, 40))
    assert state.distance == 50


@pytest.mark.parametrize(
    "sample,missing",
    [
        ((None, (1, 1)), ("red",)),
        (((1, 1), None), ("green",)),
        ((None, None), ("red", "green")),
    ],
)
def test_infer_reports_missing_markers(detector, sample, missing):
    camera = FakeCamera([sample])

    with pytest.raises(DetectionFailure) as excinfo:
        asyncio.run(MapState.infer(camera, detector))

    assert excinfo.value.missing == missing
    assert camera.snapshots == 1


def test_infer_honors_team_colors():
    from conftest import FakeDetector

    camera = FakeCamera([((5, 5), (50, 50))])
    detector = FakeDetector(car_color="green", target_color="red")

    state = asyncio.run(MapState.infer(camera, detector, TeamColors(car="green", target="red")))

    assert state.car == Position(5, 5)


def test_infer_from_real_frame():
    frame = np.zeros((480, 640, 3), np.uint8)
    cv2.rectangle(frame, (100, 100), (139, 139), (0, 0, 255), -1)
    cv2.rectangle(frame, (500, 300), (539, 339), (0, 255, 0), -1)
    camera = FakeCamera([frame])

    state = asyncio.run(MapState.infer(camera, MarkerDetector(Parameters())))

    assert state.car.x == pytest.approx(120, abs=2)
    assert state.target.y == pytest.approx(320, abs=2)


def test_map_state_is_immutable():
    state = MapState(Position(0, 0), Position(1, 1))
    with pytest.raises(AttributeError):
        state.car = Position(2, 2)
