import os
from typing import Dict, Tuple

from flask import Flask, jsonify, request
from flask_cors import CORS

from board import Board, InvalidConfig
from board_rules import Direction, is_game_over, shift, valid_moves


def resolve_spawn_range() -> range:
    low = int(os.environ.get("TILES_SPAWN_LOW", 1))
    high = int(os.environ.get("TILES_SPAWN_HIGH", 3))
    return range(low, high)


SPAWN_RANGE = resolve_spawn_range()

app = Flask(__name__)
allowed_origins = os.environ.get("TILES_ALLOWED_ORIGINS", "*")
CORS(app, resources={r"/*": {"origins": allowed_origins}})


def _bad_request(message: str) -> Tuple:
    app.logger.warning("Rejected %s: %s", request.path, message)
    return jsonify({"error": message}), 400


def _payload() -> Dict:
    payload = request.get_json(force=True, silent=False)
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise TypeError("Payload must be a JSON object")
    return payload


def _load_board(payload: Dict) -> Board:
    grid = payload.get("grid")
    if grid is None:
        raise KeyError("grid")
    return Board.from_grid(grid, score=int(payload.get("score", 0)))


def _status(board: Board) -> Dict:
    return {
        "game_over": is_game_over(board),
        "valid_moves": [direction.value for direction in valid_moves(board)],
        "max_tile": board.max_tile(),
    }


@app.post("/shift")
def shift_board():
    try:
        payload = _payload()
    except TypeError as exc:
        return _bad_request(str(exc))
    if payload.get("direction") is None:
        return _bad_request("Payload must include 'direction' key")

    try:
        board = _load_board(payload)
        direction = Direction.parse(payload["direction"])
    except KeyError:
        return _bad_request("Payload must include 'grid' key")
    except (InvalidConfig, ValueError, TypeError) as exc:
        return _bad_request(str(exc))

    try:
        traces = shift(board, direction)
        status = _status(board)
    except OverflowError as exc:
        return _bad_request(str(exc))
    if not traces:
        app.logger.info("No-op move %s", direction.value)

    response = {
        "grid": board.to_grid(),
        "traces": [trace.to_dict() for trace in traces],
        "moved": bool(traces),
        "score": board.score,
    }
    response["game_over"] = status["game_over"]
    response["valid_moves"] = status["valid_moves"]
    return jsonify(response)


@app.post("/spawn")
def spawn_tiles():
    try:
        payload = _payload()
    except TypeError as exc:
        return _bad_request(str(exc))
    try:
        board = Board.from_grid(payload["grid"], seed=payload.get("seed"))
        count = int(payload.get("count", 1))
        value_range = range(
            int(payload.get("low", SPAWN_RANGE.start)),
            int(payload.get("high", SPAWN_RANGE.stop)),
        )
        spawned = board.generate(count, value_range)
    except KeyError:
        return _bad_request("Payload must include 'grid' key")
    except (InvalidConfig, ValueError, TypeError) as exc:
        return _bad_request(str(exc))

    return jsonify({"grid": board.to_grid(), "spawned": [list(pos) for pos in spawned]})


@app.post("/status")
def board_status():
    try:
        payload = _payload()
    except TypeError as exc:
        return _bad_request(str(exc))
    try:
        board = _load_board(payload)
    except KeyError:
        return _bad_request("Payload must include 'grid' key")
    except (InvalidConfig, ValueError, TypeError) as exc:
        return _bad_request(str(exc))

    try:
        status = _status(board)
    except OverflowError as exc:
        return _bad_request(str(exc))
    return jsonify(status)


if __name__ == "__main__":
    # Use 0.0.0.0 so the web app can reach it from another process on the same machine.
    port = int(os.environ.get("PORT", 5050))
    app.run(host="0.0.0.0", port=port, debug=bool(os.environ.get("FLASK_DEBUG")))
