"""
Error handlers for the upload gate API

HTTP error handlers that return JSON responses.
"""

from quart import jsonify

def register_error_handlers(app):
    """Register error handlers"""
    
    @app.errorhandler(404)
    async def not_found_error(error):
        return jsonify({
            'error': 'Not Found',
            'message': 'The requested resource was not found.'
        }), 404

    @app.errorhandler(413)
    async def request_too_large_error(error):
        return jsonify({
            'error': 'Request Entity Too Large',
            'message': 'The request body exceeds the server limit.'
        }), 413
    
    @app.errorhandler(500)
    async def internal_server_error(error):
        return jsonify({
            'error': 'Internal Server Error',
            'message': 'An unexpected error occurred.'
        }), 500
    
    @app.errorhandler(400)
    async def bad_request_error(error):
        return jsonify({
            'error': 'Bad Request',
            'message': 'The request was invalid or malformed.'
        }), 400
