"""
Upload routes

Decodes the multipart body as it arrives, runs every part through the
admission gate in arrival order and streams the admitted files into the
configured storage.
"""

from quart import Blueprint, jsonify, request, current_app
from upload_gate.core.errors import UploadRejected, http_status_for
from upload_gate.core.logging import get_logger
from upload_gate.core.multipart import MultipartFeeder, parse_boundary
from upload_gate.core.session import SessionResult, UploadSession
from upload_gate.models.upload import (
    PolicyResponse,
    RejectedPartInfo,
    UploadedFileInfo,
    UploadResponse,
)

logger = get_logger(__name__)

upload_routes = Blueprint('uploads', __name__)


def build_response(result: SessionResult) -> UploadResponse:
    return UploadResponse(
        files=[
            UploadedFileInfo(**stored.model_dump(exclude={'buffer', 'encoding'}))
            for stored in result.files
        ],
        fields=result.fields,
        rejected=[RejectedPartInfo(
            field_name=part.field_name,
            original_name=part.original_name,
            reason=part.reason.value
        ) for part in result.rejected],
    )


async def consume_body(feeder: MultipartFeeder, chunk_size: int) -> None:
    """Feed the request body in chunk_size pieces until done or cut off"""
    async for data in request.body:
        for start in range(0, len(data), chunk_size):
            if not feeder.feed(data[start:start + chunk_size]):
                logger.info("Request body reading stopped")
                return
    feeder.feed(None)
    feeder.close()


@upload_routes.route('/uploads', methods=['POST'])
async def upload_endpoint():
    """
    Multipart upload endpoint.

    This endpoint:
    1. Checks the request's header pair count
    2. Decodes the body incrementally, admitting each field and file part
       in the order it arrives
    3. Streams admitted file bytes into storage, and stops reading the body
       as soon as a file passes max_file_size
    4. Reports accepted and rejected parts

    Returns:
        201: At least one part accepted, or nothing rejected
        422: Every part was rejected
        400: Not a multipart body, malformed body, or too many header pairs
        400/413/415: Request aborted on its first rejected part
    """
    gate = current_app.upload_gate
    session = UploadSession(
        policy=gate['policy'],
        limits=gate['limits'],
        storage=gate['storage'],
        abort_on_first_rejection=gate['abort_on_first_rejection']
    )

    boundary = parse_boundary(request.headers.get('Content-Type', ''))
    if boundary is None:
        logger.warning("Upload refused", reason="not multipart")
        return jsonify({
            'error': 'Bad Request',
            'message': 'Expected a multipart/form-data body with a boundary.'
        }), 400

    try:
        rejection = session.check_headers(len(request.headers))
        if rejection is not None:
            logger.warning("Upload refused", reason=rejection.reason.value)
            return jsonify({'error': rejection.reason.value}), http_status_for(rejection.reason)

        await consume_body(MultipartFeeder(session, boundary), gate['chunk_size'])

    except UploadRejected as e:
        logger.warning("Upload aborted",
                       reason=e.reason.value,
                       field_name=e.field_name,
                       file_name=e.original_name)
        return jsonify({
            'error': e.reason.value,
            'field_name': e.field_name,
            'original_name': e.original_name
        }), http_status_for(e.reason)
    except ValueError as e:
        session.fail()
        logger.warning("Malformed multipart body", error=str(e))
        return jsonify({
            'error': 'Bad Request',
            'message': 'The multipart body is malformed.'
        }), 400
    except BaseException:
        session.fail()
        raise

    result = session.result()
    response = build_response(result)

    logger.info("Upload processed",
                files=len(response.files),
                fields=len(response.fields),
                rejected=len(response.rejected))

    status = 422 if result.all_rejected else 201
    return jsonify(response.model_dump()), status


@upload_routes.route('/policy')
async def policy_endpoint():
    """Active limits and allow-lists"""
    gate = current_app.upload_gate
    response = PolicyResponse(
        limits=gate['limits'].model_dump(),
        allowed_extensions=sorted(gate['policy'].allowed_extensions),
        allowed_mime_types=sorted(gate['policy'].allowed_mime_types),
        storage=gate['storage'].name,
        abort_on_first_rejection=gate['abort_on_first_rejection']
    )
    return jsonify(response.model_dump())
