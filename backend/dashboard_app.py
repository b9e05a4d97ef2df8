#!/usr/bin/env python3
"""
Network Tools Dashboard API
Flask + Socket.IO backend for the network tools dashboard
"""

from flask import Flask, request, jsonify, g
from flask_cors import CORS
from flask_socketio import SocketIO
import logging
import time
from datetime import datetime, timezone
from typing import Optional

from dashboard_api.config import Settings
from dashboard_api.routes import create_api_routes
from dashboard_api.websocket_handler import WebSocketHandler
from nettools.bandwidth_monitor import BandwidthMonitor
from nettools.storage import MemoryStore
from tools_api import ToolsAPI

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
MAX_LOG_LINE = 80

logger = logging.getLogger(__name__)


def configure_logging(level: str = 'INFO'):
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format=LOG_FORMAT)


def create_app(settings: Optional[Settings] = None, store: Optional[MemoryStore] = None) -> Flask:
    """
    Build the Flask application

    Args:
        settings: Runtime settings (read from the environment when omitted)
        store: Result/event store (a fresh seeded MemoryStore when omitted)
    """
    settings = settings or Settings.from_env()
    store = store if store is not None else MemoryStore()

    # Create Flask app
    app = Flask(__name__)
    app.config['SECRET_KEY'] = settings.secret_key
    app.config['NETDASH_MODE'] = settings.mode
    app.config['PUBLIC_BASE_URL'] = settings.public_base_url
    origins = settings.allowed_origins
    CORS(app, resources={r"/*": {"origins": origins}})

    # Create SocketIO instance
    socketio = SocketIO(
        app,
        cors_allowed_origins=origins,
        async_mode='threading',
        ping_timeout=60,
        ping_interval=25
    )

    bandwidth = BandwidthMonitor(simulated=settings.simulated)
    websocket = WebSocketHandler(socketio, bandwidth)
    tools_api = ToolsAPI(store, simulated=settings.simulated, websocket=websocket)

    app.extensions['netdash'] = {
        'settings': settings,
        'store': store,
        'bandwidth': bandwidth,
        'tools_api': tools_api,
        'websocket': websocket,
    }

    create_api_routes(app, tools_api, store, bandwidth, settings, websocket)

    # =====================
    # Request Logging
    # =====================

    @app.before_request
    def start_timer():
        g.request_started = time.perf_counter()

    @app.after_request
    def log_request(response):
        if request.path.startswith('/api'):
            started = g.get('request_started', time.perf_counter())
            duration = round((time.perf_counter() - started) * 1000)
            line = f"{request.method} {request.path} {response.status_code} in {duration}ms"
            if len(line) > MAX_LOG_LINE:
                line = line[:MAX_LOG_LINE - 3] + "..."
            logger.info(line)
        return response

    # =====================
    # Health
    # =====================

    @app.route('/health', methods=['GET'])
    def health_check():
        """Health check endpoint"""
        return jsonify({
            'status': 'healthy',
            'mode': settings.mode,
            'clients': websocket.get_connected_clients_count(),
            'timestamp': datetime.now(timezone.utc).isoformat()
        })

    # =====================
    # Error Handlers
    # =====================

    @app.errorhandler(404)
    def not_found(error):
        return jsonify({'message': 'Endpoint not found'}), 404

    @app.errorhandler(405)
    def method_not_allowed(error):
        return jsonify({'message': 'Method not allowed'}), 405

    @app.errorhandler(500)
    def internal_error(error):
        logger.error(f"Internal server error: {error}")
        return jsonify({'message': 'Internal server error'}), 500

    logger.info(f"Dashboard API ready in {settings.mode} mode")
    return app


def main():
    settings = Settings.from_env()
    configure_logging(settings.log_level)
    app = create_app(settings)
    socketio = app.extensions['socketio']

    logger.info("=" * 60)
    logger.info("NETWORK TOOLS DASHBOARD API")
    logger.info("=" * 60)
    logger.info(f"Starting server on {settings.host}:{settings.port} ({settings.mode} mode)")
    logger.info("=" * 60)

    # Run with SocketIO
    socketio.run(
        app,
        host=settings.host,
        port=settings.port,
        debug=False,
        use_reloader=False,
        log_output=True,
        allow_unsafe_werkzeug=True
    )


if __name__ == '__main__':
    main()
