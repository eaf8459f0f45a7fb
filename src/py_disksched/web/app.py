"""Flask application factory for the simulator's JSON API.

The ``create_app`` function returns a Flask app with three endpoints:

- ``GET /api/algorithms`` — the registry names, in display order.
- ``POST /api/simulate`` — run one algorithm, return its trace.
- ``POST /api/compare`` — run several algorithms, return every trace.

Request bodies share one shape::

    {
        "requests": [98, 183, {"cylinder": 37, "arrival_time": 5}],
        "initial_position": 53,
        "algorithm": "SCAN",              # simulate only
        "algorithms": ["SCAN", "LOOK"],   # compare only, optional
        "time_based": false,
        "lower": 0, "upper": 199, "direction": "decreasing", ...
    }

Disk settings use the same keys as a JSON config file.  Any invalid
input is answered with status 400 and ``{"error": "..."}``.
"""

from __future__ import annotations

from dataclasses import asdict
from typing import TYPE_CHECKING, Any

from flask import Flask, Response, jsonify, request

from py_disksched.config import config_from_dict
from py_disksched.logging import Logger, LogLevel
from py_disksched.request import Request
from py_disksched.scheduling import ALGORITHM_NAMES, UnknownAlgorithmError
from py_disksched.simulator import Simulator

if TYPE_CHECKING:
    from py_disksched.result import ResultTrace

_HTTP_BAD_REQUEST = 400


def _parse_request(item: Any) -> Request:
    """Accept a bare cylinder or a ``{"cylinder", "arrival_time"}`` object."""
    if isinstance(item, bool):
        msg = f"Invalid request: {item!r}"
        raise TypeError(msg)
    if isinstance(item, int):
        return Request(item)
    if isinstance(item, dict) and "cylinder" in item:
        return Request(int(item["cylinder"]), int(item.get("arrival_time", 0)))
    msg = f"Invalid request: {item!r}"
    raise TypeError(msg)


def trace_to_dict(trace: ResultTrace) -> dict[str, Any]:
    """Return the JSON form of a trace, metrics included."""
    return {
        "algorithm": trace.algorithm_name,
        "initial_position": trace.initial_position,
        "total_movement": trace.total_movement,
        "service_order": list(trace.service_order),
        "head_path": list(trace.head_path),
        "seek_distances": list(trace.seek_distances),
        "service_times": list(trace.service_times),
        "arrival_times": list(trace.arrival_times),
        "metrics": asdict(trace.metrics),
    }


def _simulator(data: dict[str, Any]) -> tuple[Simulator, list[Request], int]:
    """Build a simulator and workload from a request body.

    Raises:
        KeyError: If ``requests`` or ``initial_position`` is missing.
        TypeError: If a field has the wrong shape.
        ValueError: If a value is invalid (bad geometry, bad token).

    """
    items = data["requests"]
    if not isinstance(items, list):
        msg = "'requests' must be a list"
        raise TypeError(msg)
    requests = [_parse_request(item) for item in items]
    position = int(data["initial_position"])
    config = config_from_dict({"verbose": False, **data})
    return Simulator(config, logger=Logger()), requests, position


def _log_lines(sim: Simulator) -> list[str]:
    return [str(e) for e in sim.logger.filter(min_level=LogLevel.INFO)]


def create_app() -> Flask:
    """Create and configure the Flask application.

    Returns:
        A configured Flask application ready to serve.

    """
    app = Flask(__name__)

    def bad_request(message: str) -> tuple[Response, int]:
        return jsonify({"error": message}), _HTTP_BAD_REQUEST

    @app.route("/api/algorithms")
    def algorithms() -> Response:  # pyright: ignore[reportUnusedFunction]
        """Return the registered algorithm names."""
        return jsonify({"algorithms": list(ALGORITHM_NAMES)})

    @app.route("/api/simulate", methods=["POST"])
    def simulate() -> tuple[Response, int] | Response:  # pyright: ignore[reportUnusedFunction]
        """Run one algorithm.

        Returns:
            JSON with ``trace`` and ``log`` fields.

        """
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            return bad_request("Expected a JSON object")
        if "algorithm" not in data:
            return bad_request("Missing 'algorithm' field")
        try:
            sim, requests, position = _simulator(data)
            trace = sim.run(
                str(data["algorithm"]),
                requests,
                position,
                time_based=bool(data.get("time_based", False)),
            )
        except UnknownAlgorithmError as e:
            return bad_request(str(e.args[0]))
        except KeyError as e:
            return bad_request(f"Missing {e.args[0]!r} field")
        except (TypeError, ValueError) as e:
            return bad_request(str(e))
        return jsonify({"trace": trace_to_dict(trace), "log": _log_lines(sim)})

    @app.route("/api/compare", methods=["POST"])
    def compare() -> tuple[Response, int] | Response:  # pyright: ignore[reportUnusedFunction]
        """Run several algorithms on one workload.

        Returns:
            JSON with ``traces`` (keyed by name), ``best`` and ``log``.

        """
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            return bad_request("Expected a JSON object")
        names = data.get("algorithms")
        if names is not None and not isinstance(names, list):
            return bad_request("'algorithms' must be a list")
        try:
            sim, requests, position = _simulator(data)
            traces = sim.compare(
                requests,
                position,
                algorithms=[str(n) for n in names] if names else None,
                time_based=bool(data.get("time_based", False)),
            )
        except UnknownAlgorithmError as e:
            return bad_request(str(e.args[0]))
        except KeyError as e:
            return bad_request(f"Missing {e.args[0]!r} field")
        except (TypeError, ValueError) as e:
            return bad_request(str(e))
        best = min(traces, key=lambda name: traces[name].total_movement)
        return jsonify(
            {
                "traces": {name: trace_to_dict(t) for name, t in traces.items()},
                "best": best,
                "log": _log_lines(sim),
            }
        )

    return app


def main() -> None:
    """Run the API development server.

    This is the ``py-disksched-web`` console entry point.
    """
    app = create_app()
    app.run(debug=True, port=8080)
