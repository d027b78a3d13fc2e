"""Lightweight HTTP API for table optimization sessions.

Exposes:
- GET    /api/tables/health                      → health check
- POST   /api/tables/sessions                    → load extraction result, return analysis
- GET    /api/tables/sessions/<id>               → current tables, analysis and history
- POST   /api/tables/sessions/<id>/apply         → apply a suggestion
- POST   /api/tables/sessions/<id>/undo          → undo a change and everything after it
- POST   /api/tables/sessions/<id>/undo-all      → restore the original tables
- DELETE /api/tables/sessions/<id>               → drop the session
"""

import os
import threading
import uuid
from typing import Any, Dict, Optional

from dotenv import load_dotenv
from flask import Flask, jsonify, request

from table_optimizer import Config, DEFAULT_CONFIG, Suggestion, TableOptimizer
from table_optimizer.extraction import parse_extraction_result

load_dotenv()

app = Flask(__name__)

_sessions: Dict[str, TableOptimizer] = {}
_sessions_lock = threading.Lock()


def load_config() -> Config:
    """Read optimizer settings from TABLE_OPTIMIZER_CONFIG if set."""
    path = os.environ.get("TABLE_OPTIMIZER_CONFIG")
    if path:
        return Config.from_file(path)
    return DEFAULT_CONFIG


@app.after_request
def add_cors_headers(response):
    """Simple CORS headers for dev usage."""
    response.headers["Access-Control-Allow-Origin"] = "*"
    response.headers["Access-Control-Allow-Headers"] = "Content-Type, Authorization"
    response.headers["Access-Control-Allow-Methods"] = "GET, POST, DELETE, OPTIONS"
    return response


def get_session(session_id: str) -> Optional[TableOptimizer]:
    with _sessions_lock:
        return _sessions.get(session_id)


def session_state(session_id: str, optimizer: TableOptimizer) -> Dict[str, Any]:
    state = optimizer.state()
    return {
        "session_id": session_id,
        "tables": [t.to_dict() for t in state.tables],
        "analysis": state.analysis.to_dict(),
        "history": [c.to_dict() for c in state.changes],
        "tables_saved": state.tables_saved,
    }


def store_session(session_id: str, optimizer: TableOptimizer, max_sessions: int):
    """Add a session, evicting the oldest ones beyond max_sessions."""
    with _sessions_lock:
        while len(_sessions) >= max_sessions:
            oldest = next(iter(_sessions))
            del _sessions[oldest]
            app.logger.info(f"Evicted session {oldest}")
        _sessions[session_id] = optimizer


def json_body() -> Dict[str, Any]:
    body = request.get_json(silent=True)
    return body if isinstance(body, dict) else {}


@app.route("/api/tables/health", methods=["GET"])
def healthcheck():
    return jsonify({"status": "ok"}), 200


@app.route("/api/tables/sessions", methods=["POST"])
def create_session():
    payload = request.get_json(silent=True)
    if payload is None:
        return jsonify({"error": "JSON body with a 'tables' list is required"}), 400

    try:
        result = parse_extraction_result(payload)
    except ValueError as e:
        return jsonify({"error": str(e)}), 400

    try:
        config = load_config()
    except (OSError, ValueError) as e:
        return jsonify({"error": f"Invalid optimizer config: {e}"}), 500

    session_id = uuid.uuid4().hex
    optimizer = TableOptimizer(result.tables, config=config)
    store_session(session_id, optimizer, config.max_sessions)

    state = session_state(session_id, optimizer)
    state["warnings"] = [w.to_dict() for w in result.warnings]
    state["confidence"] = result.confidence
    return jsonify(state), 201


@app.route("/api/tables/sessions/<session_id>", methods=["GET"])
def show_session(session_id):
    optimizer = get_session(session_id)
    if optimizer is None:
        return jsonify({"error": "session not found"}), 404
    return jsonify(session_state(session_id, optimizer)), 200


@app.route("/api/tables/sessions/<session_id>", methods=["DELETE"])
def delete_session(session_id):
    with _sessions_lock:
        removed = _sessions.pop(session_id, None)
    if removed is None:
        return jsonify({"error": "session not found"}), 404
    return jsonify({"status": "deleted"}), 200


@app.route("/api/tables/sessions/<session_id>/apply", methods=["POST"])
def apply_suggestion(session_id):
    optimizer = get_session(session_id)
    if optimizer is None:
        return jsonify({"error": "session not found"}), 404

    body = json_body()
    applied = False

    if isinstance(body.get("suggestion"), dict):
        try:
            suggestion = Suggestion.from_dict(body["suggestion"])
        except (KeyError, ValueError) as e:
            return jsonify({"error": f"invalid suggestion: {e}"}), 400
        recorded = len(optimizer.history)
        optimizer.apply(suggestion)
        applied = len(optimizer.history) > recorded
    elif body.get("suggestion_id"):
        applied = optimizer.apply_by_id(str(body["suggestion_id"])) is not None
    else:
        return jsonify({"error": "'suggestion' or 'suggestion_id' is required"}), 400

    state = session_state(session_id, optimizer)
    state["applied"] = applied
    return jsonify(state), 200


@app.route("/api/tables/sessions/<session_id>/undo", methods=["POST"])
def undo_change(session_id):
    optimizer = get_session(session_id)
    if optimizer is None:
        return jsonify({"error": "session not found"}), 404

    change_id = json_body().get("change_id")
    if not change_id:
        return jsonify({"error": "'change_id' is required"}), 400

    undone = optimizer.undo(str(change_id))
    state = session_state(session_id, optimizer)
    state["undone"] = undone
    return jsonify(state), 200


@app.route("/api/tables/sessions/<session_id>/undo-all", methods=["POST"])
def undo_all_changes(session_id):
    optimizer = get_session(session_id)
    if optimizer is None:
        return jsonify({"error": "session not found"}), 404

    undone = optimizer.undo_all()
    state = session_state(session_id, optimizer)
    state["undone"] = undone
    return jsonify(state), 200


if __name__ == "__main__":
    host = os.environ.get("API_HOST", "0.0.0.0")
    port = int(os.environ.get("API_PORT", "5000"))
    app.run(host=host, port=port)
