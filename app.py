import json
import logging
import atexit
from datetime import datetime
from flask import Flask, jsonify
from flask_sqlalchemy import SQLAlchemy
from sqlalchemy.orm import DeclarativeBase
from werkzeug.middleware.proxy_fix import ProxyFix

from config import Config

# Configure logging
logging.basicConfig(
    level=getattr(logging, Config.LOG_LEVEL.upper(), logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

Config.validate()


class Base(DeclarativeBase):
    pass


db = SQLAlchemy(model_class=Base)

# Create the app
app = Flask(__name__)
app.secret_key = Config.SESSION_SECRET
app.wsgi_app = ProxyFix(app.wsgi_app, x_proto=1, x_host=1)

app.config["SQLALCHEMY_DATABASE_URI"] = Config.DATABASE_URL
logger.info(f"Connecting to database: {Config.DATABASE_URL[:50]}...")
if Config.DATABASE_URL.startswith("postgresql"):
    app.config["SQLALCHEMY_ENGINE_OPTIONS"] = {
        "pool_recycle": 180,
        "pool_pre_ping": True,
        "pool_size": 5,
        "max_overflow": 10,
        "connect_args": {
            "connect_timeout": 30,
            "application_name": Config.APP_NAME
        }
    }

# Initialize the app with the extension
db.init_app(app)

logger.info(f"initializing: {json.dumps(Config.as_dict())}")

from ingest import SpotterIngestService
from autonomous_scheduler import init_scheduler, start_scheduler, get_scheduler_status, stop_scheduler

# Global services
ingest_service = None
autonomous_scheduler = None

with app.app_context():
    # Import models to ensure tables are created
    import models
    db.create_all()

    ingest_service = SpotterIngestService(db)
    autonomous_scheduler = init_scheduler(ingest_service, app)

    if Config.SCHEDULER_ENABLED:
        start_scheduler()
        logger.info("Autonomous scheduler started successfully")
    else:
        logger.info("Scheduler disabled by configuration")

# Shutdown scheduler when app stops
atexit.register(stop_scheduler)

# Register blueprints
from routes.api_routes import api_bp
app.register_blueprint(api_bp)


@app.route('/internal/status')
def internal_status():
    """Health status endpoint - scheduler and ingestion diagnostics"""
    try:
        from models import IngestionLog, WeatherEvent

        last_log = IngestionLog.query.order_by(IngestionLog.id.desc()).first()
        failed_recent = IngestionLog.query.filter(
            IngestionLog.success == False
        ).order_by(IngestionLog.id.desc()).limit(10).count()

        try:
            db.session.execute(db.text('SELECT 1'))
            db_status = "healthy"
        except Exception as e:
            db_status = f"error: {str(e)}"

        healthy = db_status == "healthy" and (last_log is None or last_log.success)

        return jsonify({
            'status': 'healthy' if healthy else 'warning',
            'timestamp': datetime.utcnow().isoformat(),
            'database': db_status,
            'events': {
                'total': WeatherEvent.query.count()
            },
            'ingestion': {
                'last_cycle': last_log.to_dict() if last_log else None,
                'recent_failures': failed_recent
            },
            'scheduler': get_scheduler_status(),
            'config': Config.as_dict()
        })

    except Exception as e:
        logger.error(f"Error in status endpoint: {e}")
        return jsonify({
            'status': 'error',
            'timestamp': datetime.utcnow().isoformat(),
            'error': str(e)
        }), 500


@app.route('/internal/poll', methods=['POST'])
def trigger_poll():
    """Manually run one poll cycle"""
    result = autonomous_scheduler.run_poll()
    if result is None:
        return jsonify({'status': 'skipped', 'message': 'Poll already in progress'}), 409
    if result.get('status') == 'error':
        return jsonify(result), 500
    return jsonify(result)
