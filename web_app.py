#!/usr/bin/env python3
"""
Flask web application for the CyberNews aggregator.
Serves the current story snapshot, aggregate stats, and an on-demand refresh.
"""

from flask import Flask, jsonify, request
from flask_compress import Compress
from flask_cors import CORS
import logging
import threading
import time
from typing import Optional

import schedule

from cybernews.config import Settings
from cybernews.pipeline.service import AggregatorService

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def _iso(dt) -> Optional[str]:
    return dt.isoformat() if dt else None


def create_app(service: Optional[AggregatorService] = None) -> Flask:
    settings = service.settings if service else Settings.from_env()
    svc = service or AggregatorService.from_settings(settings)

    app = Flask(__name__)
    app.config['AGGREGATOR'] = svc
    CORS(app)
    Compress(app)

    @app.route('/api/news', methods=['GET'])
    def get_news():
        try:
            limit_raw = request.args.get('limit', settings.default_news_limit)
            try:
                limit = int(limit_raw)
            except (TypeError, ValueError):
                return jsonify({'success': False, 'error': 'limit must be an integer'}), 400
            try:
                stories = svc.get_current_stories(confidence=request.args.get('confidence'), limit=limit)
            except ValueError as e:
                return jsonify({'success': False, 'error': str(e)}), 400
            snap = svc.snapshot
            return jsonify({
                'success': True,
                'data': [s.to_dict() for s in stories],
                'total': len(snap.stories),
                'lastUpdated': _iso(snap.completed_at),
                'sources': len(svc.sources),
            })
        except Exception:
            logger.exception("Error fetching news")
            return jsonify({'success': False, 'error': 'Failed to fetch news'}), 500

    @app.route('/api/stats', methods=['GET'])
    def get_stats():
        try:
            stats = svc.get_stats()
            counts = stats['count_by_confidence']
            return jsonify({
                'success': True,
                'data': {
                    'totalNews': stats['total_stories'],
                    'highConfidence': counts['high'],
                    'mediumConfidence': counts['medium'],
                    'lowConfidence': counts['low'],
                    'sources': stats['source_count'],
                    'lastUpdated': _iso(stats['last_updated']),
                },
            })
        except Exception:
            logger.exception("Error fetching stats")
            return jsonify({'success': False, 'error': 'Failed to fetch stats'}), 500

    @app.route('/api/refresh', methods=['POST'])
    def refresh():
        try:
            logger.info("Manual refresh triggered")
            _, completed_at = svc.run_ingestion_cycle()
            return jsonify({
                'success': True,
                'message': 'News refreshed successfully',
                'lastUpdated': _iso(completed_at),
            })
        except Exception:
            logger.exception("Error refreshing news")
            return jsonify({'success': False, 'error': 'Failed to refresh news'}), 500

    return app


def start_scheduler(service: AggregatorService, minutes: int) -> threading.Thread:
    """Run an ingestion cycle every ``minutes`` on a daemon thread."""
    schedule.every(minutes).minutes.do(service.run_ingestion_cycle)

    def _loop():
        while True:
            schedule.run_pending()
            time.sleep(5)

    t = threading.Thread(target=_loop, name="ingest-scheduler", daemon=True)
    t.start()
    return t


if __name__ == '__main__':
    app = create_app()
    aggregator = app.config['AGGREGATOR']
    aggregator.run_ingestion_cycle()
    logger.info("Initial news ingestion completed")
    start_scheduler(aggregator, aggregator.settings.refresh_minutes)
    logger.info("Monitoring %d security news sources", len(aggregator.sources))
    app.run(host='0.0.0.0', port=aggregator.settings.port)
