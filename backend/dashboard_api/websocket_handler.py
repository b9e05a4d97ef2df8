"""
WebSocket Handler Module
Real-time push of tool results, network events and bandwidth samples
"""

import logging
from datetime import datetime, timezone
from flask import request
from flask_socketio import emit
from typing import Dict, Any

from nettools.models import InvalidToolInput

logger = logging.getLogger(__name__)


class WebSocketHandler:
    def __init__(self, socketio, bandwidth=None):
        self.socketio = socketio
        self.bandwidth = bandwidth
        self.connected_clients = set()
        self._register_events()

    def _register_events(self):
        """Register WebSocket event handlers"""

        @self.socketio.on('connect')
        def handle_connect():
            """Handle client connection"""
            logger.info("Client connected")
            self.connected_clients.add(request.sid)
            emit('connected', {'status': 'connected'})

        @self.socketio.on('disconnect')
        def handle_disconnect(*args):
            """Handle client disconnection"""
            logger.info("Client disconnected")
            self.connected_clients.discard(request.sid)

        @self.socketio.on('subscribe_bandwidth')
        def handle_subscribe_bandwidth(data=None):
            """Send one bandwidth sample back to the requesting client"""
            if self.bandwidth is None:
                emit('bandwidth_error', {'message': 'Bandwidth monitor unavailable'})
                return
            if data is not None and not isinstance(data, dict):
                emit('bandwidth_error', {'message': 'Expected an object like {"interface": "eth0"}'})
                return
            interface = (data or {}).get('interface')
            try:
                emit('bandwidth_sample', self.bandwidth.sample(interface))
            except InvalidToolInput as e:
                emit('bandwidth_error', {'message': str(e)})

    def broadcast_tool_result(self, result: Dict[str, Any]):
        """Broadcast a freshly stored tool result to all clients"""
        self.socketio.emit('tool_result', result)

    def broadcast_event_created(self, event: Dict[str, Any]):
        """Broadcast a new network event"""
        self.socketio.emit('event_created', {
            'event': event,
            'timestamp': datetime.now(timezone.utc).isoformat()
        })

    def get_connected_clients_count(self) -> int:
        """Get number of connected clients"""
        return len(self.connected_clients)
