"""
API Routes Module
REST API endpoints for the network tools dashboard
"""

import logging
from datetime import datetime, timezone
from flask import Response, jsonify, request
from pydantic import ValidationError

from dashboard_api import seo
from dashboard_api.schemas import EventCreate, EventPatch, ResultCreate, ToolPatch
from nettools.models import InvalidToolInput
from tools_api import TOOL_LABELS, UnknownTool

logger = logging.getLogger(__name__)

NETWORK_UPTIME = 99.9  # simulated figure shown on the dashboard


def invalid_data(error: ValidationError):
    """400 response carrying pydantic's error list"""
    errors = error.errors(include_url=False, include_context=False, include_input=False)
    return jsonify({'message': 'Invalid data', 'errors': errors}), 400


def _json_body():
    """Request body as parsed JSON; missing or malformed bodies read as {}"""
    data = request.get_json(silent=True)
    return {} if data is None else data


def _limit_arg():
    limit = request.args.get('limit', type=int)
    if limit is None or limit <= 0:
        return None
    return limit


def create_api_routes(app, tools_api, store, bandwidth, settings, websocket=None):
    """Create and register API routes"""

    # =====================
    # Tool Catalogue
    # =====================

    @app.route('/api/tools', methods=['GET'])
    def list_tools():
        """Get the tool catalogue"""
        return jsonify([tool.to_dict() for tool in store.list_tools()])

    @app.route('/api/tools/<tool_id>', methods=['GET'])
    def get_tool(tool_id):
        tool = store.get_tool(tool_id)
        if tool is None:
            return jsonify({'message': 'Tool not found'}), 404
        return jsonify(tool.to_dict())

    @app.route('/api/tools/<tool_id>', methods=['PATCH'])
    def update_tool(tool_id):
        try:
            patch = ToolPatch.model_validate(_json_body())
        except ValidationError as e:
            return invalid_data(e)

        tool = store.update_tool(tool_id, patch.to_fields())
        if tool is None:
            return jsonify({'message': 'Tool not found'}), 404
        return jsonify(tool.to_dict())

    # =====================
    # Tool Execution
    # =====================

    @app.route('/api/tools/<tool_name>', methods=['POST'])
    def run_tool(tool_name):
        """Run one network tool and return its stored result envelope"""
        label = TOOL_LABELS.get(tool_name, tool_name)
        try:
            result = tools_api.run(tool_name, _json_body())
            return jsonify(result.to_dict())
        except UnknownTool:
            return jsonify({'message': f'Unknown tool: {tool_name}'}), 404
        except ValidationError as e:
            return invalid_data(e)
        except InvalidToolInput as e:
            return jsonify({'message': 'Invalid data', 'error': str(e)}), 400
        except Exception as e:
            logger.error(f"{label} failed: {e}", exc_info=True)
            return jsonify({'message': f'{label} failed', 'error': str(e)}), 500

    # =====================
    # Tool Results
    # =====================

    @app.route('/api/results', methods=['GET'])
    def list_results():
        """Get stored results, newest first"""
        tool_name = request.args.get('toolName') or None
        results = store.list_results(tool_name=tool_name, limit=_limit_arg())
        return jsonify([result.to_dict() for result in results])

    @app.route('/api/results', methods=['POST'])
    def create_result():
        try:
            data = ResultCreate.model_validate(_json_body())
        except ValidationError as e:
            return invalid_data(e)

        result = store.create_result(**data.to_fields())
        if websocket:
            websocket.broadcast_tool_result(result.to_dict())
        return jsonify(result.to_dict()), 201

    @app.route('/api/results/<result_id>', methods=['GET'])
    def get_result(result_id):
        result = store.get_result(result_id)
        if result is None:
            return jsonify({'message': 'Result not found'}), 404
        return jsonify(result.to_dict())

    @app.route('/api/results/<result_id>', methods=['DELETE'])
    def delete_result(result_id):
        if not store.delete_result(result_id):
            return jsonify({'message': 'Result not found'}), 404
        return '', 204

    # =====================
    # Network Events
    # =====================

    @app.route('/api/events', methods=['GET'])
    def list_events():
        return jsonify([event.to_dict() for event in store.list_events(limit=_limit_arg())])

    @app.route('/api/events', methods=['POST'])
    def create_event():
        try:
            data = EventCreate.model_validate(_json_body())
        except ValidationError as e:
            return invalid_data(e)

        event = store.create_event(data.to_fields())
        logger.info(f"Event {event.event_type} ({event.severity.value}) recorded")
        if websocket:
            websocket.broadcast_event_created(event.to_dict())
        return jsonify(event.to_dict()), 201

    @app.route('/api/events/<event_id>', methods=['GET'])
    def get_event(event_id):
        event = store.get_event(event_id)
        if event is None:
            return jsonify({'message': 'Event not found'}), 404
        return jsonify(event.to_dict())

    @app.route('/api/events/<event_id>', methods=['PATCH'])
    def update_event(event_id):
        try:
            patch = EventPatch.model_validate(_json_body())
        except ValidationError as e:
            return invalid_data(e)

        event = store.update_event(event_id, patch.to_fields())
        if event is None:
            return jsonify({'message': 'Event not found'}), 404
        return jsonify(event.to_dict())

    @app.route('/api/events/<event_id>', methods=['DELETE'])
    def delete_event(event_id):
        if not store.delete_event(event_id):
            return jsonify({'message': 'Event not found'}), 404
        return '', 204

    # =====================
    # Dashboard & Bandwidth
    # =====================

    @app.route('/api/dashboard/stats', methods=['GET'])
    def dashboard_stats():
        """Summary figures for the dashboard header"""
        try:
            stats = store.stats()
            return jsonify({
                'networkUptime': NETWORK_UPTIME,
                'activeDevices': stats['active_devices'],
                'bandwidthUsage': bandwidth.current_usage(),
                'securityAlerts': stats['open_alerts'],
                'totalResults': stats['total_results'],
                'resultsLast24h': stats['results_last_24h'],
                'mode': settings.mode,
                'lastUpdate': datetime.now(timezone.utc).isoformat()
            })
        except Exception as e:
            logger.error(f"Failed to get dashboard stats: {e}")
            return jsonify({'message': 'Failed to get dashboard stats', 'error': str(e)}), 500

    @app.route('/api/bandwidth/interfaces', methods=['GET'])
    def bandwidth_interfaces():
        try:
            return jsonify(bandwidth.interfaces())
        except Exception as e:
            logger.error(f"Failed to list interfaces: {e}")
            return jsonify({'message': 'Failed to list interfaces', 'error': str(e)}), 500

    @app.route('/api/bandwidth/sample', methods=['GET'])
    def bandwidth_sample():
        """Current throughput; not stored as a result"""
        try:
            return jsonify(bandwidth.sample(request.args.get('interface') or None))
        except InvalidToolInput as e:
            return jsonify({'message': 'Invalid data', 'error': str(e)}), 400
        except Exception as e:
            logger.error(f"Bandwidth sampling failed: {e}", exc_info=True)
            return jsonify({'message': 'Bandwidth sampling failed', 'error': str(e)}), 500

    # =====================
    # Crawler Files
    # =====================

    @app.route('/robots.txt', methods=['GET'])
    def robots_txt():
        response = Response(seo.robots_txt(settings.public_base_url), mimetype='text/plain')
        response.headers['Cache-Control'] = seo.CACHE_CONTROL
        return response

    @app.route('/sitemap.xml', methods=['GET'])
    def sitemap_xml():
        response = Response(seo.sitemap_xml(settings.public_base_url), mimetype='application/xml')
        response.headers['Cache-Control'] = seo.CACHE_CONTROL
        return response
