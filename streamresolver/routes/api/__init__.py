"""
API routes package
Exports all API blueprints and aggregates them into api_bp
"""
from flask import Blueprint

from .providers_api import providers_api_bp
from .resolve_api import resolve_api_bp

api_bp = Blueprint('api', __name__)

api_bp.register_blueprint(providers_api_bp, url_prefix='')
api_bp.register_blueprint(resolve_api_bp, url_prefix='')

__all__ = ['api_bp', 'providers_api_bp', 'resolve_api_bp']
