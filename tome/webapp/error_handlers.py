"""JSON error responses for wiki errors raised inside a Flask application."""

from __future__ import annotations

from flask import current_app, jsonify, request

from tome.domain.wiki.exceptions import WikiError

STATUS_BY_KIND = {
    "not_found": 404,
    "validation": 400,
    "conflict": 409,
    "access_denied": 403,
    "multiple_results": 500,
    "consistency": 500,
    "internal": 500,
}

# 5xxで文言をそのまま返してよいもの（既に詳細を伏せたメッセージ）
_SANITIZED_KINDS = {"internal"}


def status_for(error: WikiError) -> int:
    return STATUS_BY_KIND.get(error.kind, 500)


def error_payload(error: WikiError) -> dict:
    code = status_for(error)
    if code >= 500 and error.kind not in _SANITIZED_KINDS:
        return {"error": error.kind, "message": "Internal Server Error"}
    return error.to_dict()


def register_error_handlers(app) -> None:
    """Register the handler that maps :class:`WikiError` to a JSON envelope."""

    @app.errorhandler(WikiError)
    def handle_wiki_error(error: WikiError):
        code = status_for(error)
        if code >= 500:
            current_app.logger.error(
                "%s %s (%s)", code, request.path, error.kind,
                exc_info=error, extra={"event": "wiki.http_5xx"},
            )
        else:
            current_app.logger.warning(
                "%s %s (%s)", code, request.path, error.kind,
                extra={"event": "wiki.http_4xx"},
            )

        response = jsonify(error_payload(error))
        response.status_code = code
        return response


__all__ = ["STATUS_BY_KIND", "error_payload", "register_error_handlers", "status_for"]
