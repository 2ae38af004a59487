"""
Sequential runner for a list of load tests.
"""

import logging
from typing import List, Optional

from algorithms.batch import BatchExecutor
from models.request import RequestSpec, ResultRecord

logger = logging.getLogger(__name__)


class RunAggregator:
    """Runs specs one after another and collects their records in input order."""

    def __init__(self, executor: Optional[BatchExecutor] = None):
        self.executor = executor or BatchExecutor()

    async def run_all(self, specs: List[RequestSpec]) -> List[ResultRecord]:
        """Run every spec to completion before starting the next.

        All specs are validated first, so one bad spec rejects the whole
        submission before any request is sent.

        Raises:
            SpecValidationError: If any spec is invalid
        """
        for spec in specs:
            spec.validate()

        results: List[ResultRecord] = []
        for index, spec in enumerate(specs):
            logger.info(f"=== Run {index + 1}/{len(specs)}: {spec.method} {spec.url} ===")
            results.append(await self.executor.run_batch(spec))

        return results
