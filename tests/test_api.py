"""API tests for position, solar noon and change endpoints."""

from __future__ import annotations

import pytest

from solcalc.config import SolverConfig


def _client(config: SolverConfig | None = None) -> object:
    """Create FastAPI TestClient with optional dependency guards."""
    pytest.importorskip("fastapi")
    testclient_module = pytest.importorskip("fastapi.testclient")
    from solcalc.api.app import create_app

    return testclient_module.TestClient(create_app(config))


def test_position_endpoint_returns_position_and_level() -> None:
    """`POST /position` should interpret naive time as wall time in the zone."""
    client = _client()

    response = client.post(
        "/position",
        json={
            "time": "2024-01-23T06:00:00",
            "zone": "America/Los_Angeles",
            "lat": 37.77,
            "lon": -122.42,
        },
    )

    assert response.status_code == 200
    body = response.json()
    assert body["azimuth"] == pytest.approx(102.59, abs=0.01)
    assert body["elevation"] == pytest.approx(-15.87, abs=0.01)
    assert body["declination"] == pytest.approx(-19.48, abs=0.01)
    assert body["sunlight_level"] == "astronomical_twilight"


def test_position_endpoint_converts_aware_time() -> None:
    """An aware time names the same instant whatever zone is requested."""
    client = _client()

    naive = client.post(
        "/position",
        json={"time": "2024-01-23T06:00:00", "zone": "America/Los_Angeles", "lat": 37.77, "lon": -122.42},
    )
    aware = client.post(
        "/position",
        json={"time": "2024-01-23T14:00:00+00:00", "zone": "America/Los_Angeles", "lat": 37.77, "lon": -122.42},
    )

    assert aware.status_code == 200
    assert aware.json()["elevation"] == pytest.approx(naive.json()["elevation"], abs=1e-9)


def test_solar_noon_endpoint() -> None:
    """`POST /solar-noon` should return a zoned transit time."""
    client = _client()

    response = client.post(
        "/solar-noon",
        json={"day": "2024-01-25", "zone": "America/Los_Angeles", "lon": -122.42},
    )

    assert response.status_code == 200
    assert response.json()["time"].startswith("2024-01-25T12:21:5")


def test_changes_endpoint_returns_ordered_changes() -> None:
    """`POST /changes` should list the requested number of changes."""
    client = _client()

    response = client.post(
        "/changes",
        json={
            "time": "2024-01-28T00:00:00",
            "zone": "America/Los_Angeles",
            "lat": 37.35,
            "lon": -121.95,
            "count": 2,
        },
    )

    assert response.status_code == 200
    changes = response.json()["changes"]
    assert [change["name"] for change in changes] == ["astronomical_dawn", "nautical_dawn"]
    assert changes[0]["previous_level"] == "night"
    assert changes[1]["new_level"] == "nautical_twilight"
    assert all(change["is_sun_rising"] for change in changes)


def test_changes_endpoint_maps_solver_errors_to_422() -> None:
    """Exhausted polar skipping should surface as an unprocessable request."""
    client = _client(SolverConfig(max_polar_skips=1))

    response = client.post(
        "/changes",
        json={
            "time": "2024-04-17T00:00:00",
            "zone": "Europe/Berlin",
            "lat": 78.92,
            "lon": 11.93,
            "count": 1,
        },
    )

    assert response.status_code == 422
    assert "polar skips" in response.json()["detail"]


@pytest.mark.parametrize(
    ("path", "payload"),
    [
        ("/position", {"time": "2024-01-23T06:00:00", "zone": "Mars/Olympus", "lat": 0, "lon": 0}),
        ("/position", {"time": "2024-01-23T06:00:00", "lat": 91, "lon": 0}),
        ("/solar-noon", {"day": "2024-01-25", "lon": 181}),
        ("/changes", {"time": "2024-01-28T00:00:00", "lat": 0, "lon": 0, "count": 0}),
        ("/changes", {"time": "2024-01-28T00:00:00", "lat": 0, "lon": 0, "count": 65}),
    ],
)
def test_endpoints_reject_invalid_requests(path: str, payload: dict[str, object]) -> None:
    """Out-of-range coordinates, counts and unknown zones return 422."""
    client = _client()

    response = client.post(path, json=payload)

    assert response.status_code == 422


@pytest.mark.parametrize(
    ("path", "target", "payload"),
    [
        (
            "/position",
            "solcalc.api.app.solar_position",
            {"time": "2024-01-23T06:00:00", "lat": 0, "lon": 0},
        ),
        ("/solar-noon", "solcalc.api.app.solar_noon", {"day": "2024-01-25", "lon": 0}),
        (
            "/changes",
            "solcalc.api.app.sunlight_changes",
            {"time": "2024-01-28T00:00:00", "lat": 0, "lon": 0, "count": 1},
        ),
    ],
)
def test_endpoints_map_domain_errors_to_422(
    monkeypatch: pytest.MonkeyPatch, path: str, target: str, payload: dict[str, object]
) -> None:
    """Library ValueErrors such as math domain errors return 422 with their message."""
    client = _client()
    from solcalc.precision.decimal_math import PrecisionDomainError

    def _raise(*args: object, **kwargs: object) -> object:
        raise PrecisionDomainError("argument must be in [-1, 1], got 1.5")

    monkeypatch.setattr(target, _raise)

    response = client.post(path, json=payload)

    assert response.status_code == 422
    assert response.json()["detail"] == "argument must be in [-1, 1], got 1.5"
