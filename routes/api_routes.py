"""
API Routes for the Spotter Network loader
Read-only endpoints over stored events and poll history
"""

import logging
from flask import Blueprint, jsonify, request
from datetime import datetime
from models import WeatherEvent, IngestionLog

logger = logging.getLogger(__name__)

MAX_LIMIT = 500

# Create API Blueprint
api_bp = Blueprint('api', __name__, url_prefix='/api')


def _limit_arg(default=50):
    try:
        limit = int(request.args.get('limit', default))
    except ValueError:
        limit = default
    return max(1, min(limit, MAX_LIMIT))


@api_bp.route('/health')
def health():
    """API health check endpoint"""
    try:
        event_count = WeatherEvent.query.count()
        log_count = IngestionLog.query.count()

        return jsonify({
            "status": "healthy",
            "service": "Spotter Network Loader",
            "timestamp": datetime.utcnow().isoformat() + "Z",
            "database": {
                "events": event_count,
                "ingestion_logs": log_count
            }
        })
    except Exception as e:
        logger.error(f"Health check failed: {e}")
        return jsonify({
            "status": "error",
            "message": str(e)
        }), 500


@api_bp.route('/events/recent')
def recent_events():
    """Most recent stored events, optionally filtered by broad hazard type"""
    try:
        query = WeatherEvent.query
        hazard = request.args.get('hazard')
        if hazard:
            query = query.filter(WeatherEvent.hazard_type == hazard)

        events = query.order_by(WeatherEvent.event_ts.desc()).limit(_limit_arg()).all()

        return jsonify({
            'events': [event.to_dict() for event in events],
            'count': len(events),
            'hazard': hazard,
            'timestamp': datetime.utcnow().isoformat() + 'Z'
        })

    except Exception as e:
        logger.error(f"Error fetching recent events: {e}")
        return jsonify({'error': str(e)}), 500


@api_bp.route('/ingestion/logs')
def ingestion_logs():
    """Recent poll cycles, newest first"""
    try:
        logs = IngestionLog.query.order_by(IngestionLog.id.desc()).limit(_limit_arg(20)).all()
        return jsonify({
            'logs': [log.to_dict() for log in logs],
            'count': len(logs)
        })

    except Exception as e:
        logger.error(f"Error fetching ingestion logs: {e}")
        return jsonify({'error': str(e)}), 500
