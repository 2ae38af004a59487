"""
Request handlers for the load test API.
"""

import json
import logging
from typing import Optional

from aiohttp import web

from algorithms.aggregator import RunAggregator
from models.request import SpecValidationError, parse_specs

logger = logging.getLogger(__name__)


class Handler:
    """Handles load test submissions."""

    def __init__(self, aggregator: Optional[RunAggregator] = None):
        self.aggregator = aggregator or RunAggregator()

    async def post_test(self, request: web.Request) -> web.Response:
        """Run a JSON array of request specs and answer with their results."""
        try:
            payload = await request.json()
            specs = parse_specs(payload)
        except (json.JSONDecodeError, UnicodeDecodeError, SpecValidationError) as e:
            logger.warning(f"Rejected load test submission: {e}")
            return web.json_response({"error": str(e)}, status=400)

        logger.info(f"Accepted load test submission with {len(specs)} specs")
        results = await self.aggregator.run_all(specs)
        return web.json_response([record.to_json() for record in results])
