"""
Stream resolution endpoint
Runs the orchestrator for one media item and reports per-provider failures
"""
from flask import Blueprint, request, jsonify, current_app
import logging
from uuid import uuid4

from ...core.errors import AggregateNoStreamFoundError, StaleResolutionError, ValidationError
from ...core.extensions import limiter
from ...models.media import MediaMeta
from ...utils.progress import get_client_tracker, store_resolve_progress

resolve_api_bp = Blueprint('resolve_api', __name__)
logger = logging.getLogger(__name__)


@resolve_api_bp.route('/resolve', methods=['POST'])
@limiter.limit(lambda: current_app.config.get('RESOLVE_RATE_LIMIT', '30 per minute'))
async def resolve():
    """
    Resolve a playable stream.

    Body: {"media": {...}, "episodeId": "...", "clientId": "...", "requestId": "..."}
    A newer request with the same clientId supersedes an older one (409).
    """
    body = request.get_json(silent=True) or {}
    request_id = str(body.get('requestId') or uuid4().hex)
    episode_id = body.get('episodeId')
    client_id = body.get('clientId')

    try:
        media = MediaMeta.from_dict(body.get('media'))
    except ValidationError as e:
        return jsonify({'success': False, 'requestId': request_id, 'message': str(e)}), 400

    token = get_client_tracker(str(client_id)).begin() if client_id else None

    store_resolve_progress(request_id, {
        'status': 'starting',
        'provider': None,
        'percentage': 0,
        'message': f'Resolving {media.display_name}...'
    })

    def progress_callback(event):
        """Progress callback to update the poll endpoint"""
        store_resolve_progress(request_id, {
            'status': 'resolving',
            'provider': event.provider_id,
            'percentage': round(event.overall, 1),
            'message': f'Trying {event.provider_id}...'
        })

    try:
        result = await current_app.orchestrator.resolve(
            media,
            episode_id=str(episode_id) if episode_id is not None else None,
            on_progress=progress_callback,
            token=token,
        )
    except ValidationError as e:
        store_resolve_progress(request_id, {'status': 'failed', 'percentage': 0, 'message': str(e)})
        return jsonify({'success': False, 'requestId': request_id, 'message': str(e)}), 400
    except StaleResolutionError as e:
        store_resolve_progress(request_id, {'status': 'superseded', 'message': str(e)})
        return jsonify({'success': False, 'requestId': request_id, 'message': 'Superseded by a newer request.'}), 409
    except AggregateNoStreamFoundError as e:
        logger.info(f"No stream for {media.display_name}: {e}")
        store_resolve_progress(request_id, {'status': 'failed', 'message': 'No stream could be found.'})
        return jsonify({
            'success': False,
            'requestId': request_id,
            'message': 'No stream could be found.',
            'failures': e.to_dict(),
        }), 404

    store_resolve_progress(request_id, {
        'status': 'done',
        'provider': result.provider_id,
        'percentage': 100,
        'message': f'Resolved by {result.provider_id}'
    })
    return jsonify({
        'success': True,
        'requestId': request_id,
        'provider': result.provider_id,
        'result': result.to_dict(),
    }), 200
