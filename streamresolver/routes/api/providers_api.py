"""
Provider catalog and resolution progress endpoints
"""
from flask import Blueprint, request, jsonify, current_app

from ...models.media import MediaType
from ...utils.progress import get_resolve_progress

providers_api_bp = Blueprint('providers_api', __name__)


@providers_api_bp.route('/providers', methods=['GET'])
def list_providers():
    """List registered providers, optionally only those supporting ?type="""
    media_type = request.args.get('type')
    registry = current_app.registry

    if media_type:
        try:
            providers = registry.list(MediaType(media_type))
        except ValueError:
            return jsonify({'success': False, 'message': f'Unknown media type: {media_type}'}), 400
    else:
        providers = sorted(registry, key=lambda p: -p.rank)

    return jsonify({'success': True, 'providers': [p.describe() for p in providers]}), 200


@providers_api_bp.route('/resolve/<request_id>/progress', methods=['GET'])
def resolve_progress(request_id):
    """Latest progress snapshot of a resolution started with this requestId"""
    progress = get_resolve_progress(request_id)
    if not progress:
        return jsonify({'success': False, 'message': 'Unknown request id.'}), 404
    return jsonify({'success': True, **progress}), 200
