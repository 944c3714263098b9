"""
General routes for the upload gate API

Basic endpoints for health checks and welcome messages.
"""

from quart import Blueprint, jsonify
from upload_gate import __version__
from upload_gate.core.logging import get_logger

logger = get_logger(__name__)

# Create general routes blueprint
general_routes = Blueprint('general', __name__)

@general_routes.route('/')
async def welcome():
    """Welcome message endpoint"""
    logger.info("Welcome endpoint accessed")
    return jsonify({
        'message': 'Welcome to the upload gate API!',
        'status': 'running',
        'description': 'Admission control for multipart file uploads'
    })

@general_routes.route('/health')
async def health_check():
    """Health check endpoint"""
    logger.info("Health check endpoint accessed")
    return jsonify({
        'status': 'healthy',
        'service': 'upload-gate',
        'version': __version__
    })
