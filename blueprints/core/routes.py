from __future__ import annotations
import json, logging
from datetime import datetime

from flask import g, jsonify, request
from flask_wtf.csrf import CSRFError, generate_csrf
from pydantic import ValidationError
from werkzeug.exceptions import HTTPException
from werkzeug.wrappers.response import Response

from . import bp                 # используем bp из __init__.py
from . import api_bp

EXTRA_KEYS = ("event", "path", "method", "status", "duration_ms", "reservation_id", "table_number")

class JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "ts": datetime.utcnow().isoformat(timespec="milliseconds") + "Z",
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        for key in EXTRA_KEYS:
            if hasattr(record, key):
                payload[key] = getattr(record, key)
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)

def _setup_structured_logging(app):
    # app.logger для запросов, root для логгеров сервисов (logging.getLogger(__name__))
    for logger in (app.logger, logging.getLogger()):
        has_json = any(
            isinstance(h, logging.StreamHandler)
            and isinstance(getattr(h, "formatter", None), JSONFormatter)
            for h in logger.handlers
        )
        if not has_json:
            handler = logging.StreamHandler()
            handler.setFormatter(JSONFormatter())
            logger.addHandler(handler)
        logger.setLevel(logging.INFO)
    # иначе каждая запись app.logger попадёт в stderr дважды
    app.logger.propagate = False

def _pydantic_errors_safe(ve: ValidationError):
    errs = ve.errors(include_url=False)
    for e in errs:
        if "ctx" in e and isinstance(e["ctx"], dict):
            e["ctx"] = {k: str(v) for k, v in e["ctx"].items()}
    return errs

@api_bp.get("/csrf")
def get_csrf():
    token = generate_csrf()
    resp = jsonify({"csrf": token})
    resp.set_cookie("csrf_token", token, samesite="Lax")
    return resp

@bp.app_errorhandler(ValidationError)
def _validation_error(err: ValidationError):
    return jsonify({"ok": False, "error": "validation_error", "details": _pydantic_errors_safe(err)}), 400

@bp.app_errorhandler(HTTPException)
def _http_error(err: HTTPException):
    code = (err.name or "error").lower().replace(" ", "_")
    return jsonify({"ok": False, "error": code, "message": err.description}), err.code

@bp.app_errorhandler(CSRFError)
def _csrf_error(err: CSRFError):
    return jsonify({"ok": False, "error": "csrf", "message": err.description}), 400

@bp.before_app_request
def _start_timer():
    g._req_start = datetime.utcnow()

@bp.after_app_request
def _log_request(response: Response):
    start = getattr(g, "_req_start", None)
    duration_ms = int((datetime.utcnow() - start).total_seconds() * 1000) if start else None
    extra = {
        "event": "http_request",
        "path": request.path,
        "method": request.method,
        "status": response.status_code,
        "duration_ms": duration_ms,
    }
    logging.getLogger("http").info("request handled", extra=extra)
    return response

@bp.record_once
def _on_register(state):
    _setup_structured_logging(state.app)

@bp.get("/health")
def health():
    return jsonify({
        "status": "ok",
        "ts": datetime.utcnow().isoformat(timespec="seconds") + "Z",
    })
