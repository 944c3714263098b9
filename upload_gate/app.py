"""
Upload Gate API Application

A Quart-based API that admits or rejects multipart upload parts.
"""

from typing import Optional

from quart import Quart
from dotenv import load_dotenv

from upload_gate.config.settings import Settings, build_limits, build_policy, settings as default_settings
from upload_gate.core.logging import configure_logging, get_logger
from upload_gate.routes.errors import register_error_handlers
from upload_gate.routes.general import general_routes
from upload_gate.routes.uploads import upload_routes
from upload_gate.storage import build_storage

# Load environment variables
load_dotenv()

logger = get_logger(__name__)

def create_app(settings: Optional[Settings] = None, log_to_console: Optional[bool] = None):
    """Create and configure the app"""
    settings = settings or default_settings
    configure_logging(log_file=settings.log_file, log_to_console=log_to_console)

    logger.info("Creating Quart application")

    app = Quart(__name__, static_folder=None)

    # Whole-body cap; per-part bounds are enforced by the gate
    app.config['MAX_CONTENT_LENGTH'] = settings.max_request_size
    app.config['PROVIDE_AUTOMATIC_OPTIONS'] = True

    # Limits, policy and storage are built once and shared by every request
    limits = build_limits(settings)
    policy = build_policy(settings)
    storage = build_storage(settings)
    app.upload_gate = {
        'limits': limits,
        'policy': policy,
        'storage': storage,
        'chunk_size': settings.chunk_size,
        'abort_on_first_rejection': settings.abort_on_first_rejection
    }
    logger.info("Upload gate configured",
                storage=storage.name,
                extensions=sorted(policy.allowed_extensions),
                mime_types=sorted(policy.allowed_mime_types),
                **limits.model_dump())

    logger.info("Registering routes")
    app.register_blueprint(general_routes)
    app.register_blueprint(upload_routes)

    # Register error handlers
    register_error_handlers(app)

    logger.info("Application created successfully")
    return app
