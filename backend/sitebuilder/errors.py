import structlog
from flask import jsonify
from werkzeug.exceptions import HTTPException

from sitebuilder.domain.exceptions import StorageError

logger = structlog.get_logger(__name__)


def register_error_handlers(app):
    @app.errorhandler(StorageError)
    def handle_storage_error(error):
        logger.error("storage_unavailable", operation=error.operation, error=str(error))
        response = jsonify({
            "error": "StorageError",
            "message": "Site content is temporarily unavailable"
        })
        response.status_code = 500
        return response

    @app.errorhandler(HTTPException)
    def handle_http_exception(error):
        response = jsonify({
            "error": type(error).__name__,
            "message": error.description
        })
        response.status_code = error.code
        return response
