import asyncio
import base64

import cv2
import pytest
from fastapi.testclient import TestClient

from skinsim import main
from skinsim.main import app

from conftest import DARK_SKIN, GRAY, SKIN, solid


@pytest.fixture
def client():
    return TestClient(app)


def png_bytes(rgba):
    ok, png = cv2.imencode(".png", cv2.cvtColor(rgba, cv2.COLOR_RGBA2BGR))
    assert ok
    return png.tobytes()


@pytest.fixture
def face_png():
    rgba = solid(64, 64, GRAY)
    rgba[12:52, 16:48, :3] = SKIN
    rgba[22:28, 20:44, :3] = DARK_SKIN
    return png_bytes(rgba)


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_simulate(client, face_png):
    response = client.post(
        "/api/simulate",
        files={"image": ("face.png", face_png, "image/png")},
        data={"concernType": "darkCircles", "intensity": "0.8"},
    )
    assert response.status_code == 200
    body = response.json()
    assert body["image"].startswith("data:image/jpeg;base64,")
    assert base64.b64decode(body["image"].split(",", 1)[1])[:2] == b"\xff\xd8"
    assert body["faceRegion"]["radius"] > 0


def test_simulate_zero_intensity_has_no_region(client, face_png):
    response = client.post(
        "/api/simulate",
        files={"image": ("face.png", face_png, "image/png")},
        data={"concernType": "texture", "intensity": "0"},
    )
    assert response.status_code == 200
    assert response.json()["faceRegion"] is None


@pytest.mark.parametrize(
    "form",
    [
        {"concernType": "wrinkles", "intensity": "0.5"},
        {"concernType": "redness", "intensity": "1.5"},
        {"concernType": "redness"},
    ],
)
def test_simulate_rejects_invalid_form(client, face_png, form):
    response = client.post(
        "/api/simulate",
        files={"image": ("face.png", face_png, "image/png")},
        data=form,
    )
    assert response.status_code == 422


def test_simulate_rejects_bad_image(client):
    response = client.post(
        "/api/simulate",
        files={"image": ("face.png", b"garbage", "image/png")},
        data={"concernType": "redness", "intensity": "0.5"},
    )
    assert response.status_code == 400


def test_validate_frame(client, face_png):
    response = client.post(
        "/api/validate-frame",
        files={"image": ("face.png", face_png, "image/png")},
    )
    assert response.status_code == 200
    body = response.json()
    assert body["aligned"] is True
    assert body["status"] == "OK"
    assert body["centerPoint"] == {"x": 32.0, "y": 32.0}


def test_validate_frame_misaligned(client):
    response = client.post(
        "/api/validate-frame",
        files={"image": ("bg.png", png_bytes(solid(32, 32, GRAY)), "image/png")},
    )
    assert response.json()["message"] == "Align Face"


def test_analyze(client, face_png):
    response = client.post(
        "/api/analyze",
        files={"image": ("face.png", face_png, "image/png")},
    )
    assert response.status_code == 200
    assert response.json()["sagging"] == 85


def test_validate_frame_failure_is_500(client, face_png, monkeypatch):
    def broken(buffer):
        raise RuntimeError("validator exploded")

    monkeypatch.setattr(main.pipeline, "validate_frame", broken)
    response = client.post(
        "/api/validate-frame",
        files={"image": ("face.png", face_png, "image/png")},
    )
    assert response.status_code == 500
    assert "validator exploded" in response.json()["detail"]


def _off_loop(calls, fn):
    def wrapper(*args):
        try:
            asyncio.get_running_loop()
            calls.append("event-loop")
        except RuntimeError:
            calls.append("worker")
        return fn(*args)

    return wrapper


@pytest.mark.parametrize(
    "path,method,form",
    [
        ("/api/simulate", "apply", {"concernType": "texture", "intensity": "0.5"}),
        ("/api/validate-frame", "validate_frame", None),
        ("/api/analyze", "analyze", None),
    ],
)
def test_pixel_work_runs_off_event_loop(client, face_png, monkeypatch, path, method, form):
    calls = []
    monkeypatch.setattr(main.pipeline, method, _off_loop(calls, getattr(main.pipeline, method)))
    response = client.post(
        path,
        files={"image": ("face.png", face_png, "image/png")},
        data=form,
    )
    assert response.status_code == 200
    assert calls == ["worker"]
