"""
Configuration constants for the URL load tester.

This module contains all configuration parameters including:
- API server binding
- Attempt and reachability probe timeouts
- Pseudo-TLD bounds used by the reachability heuristic
- Dispatch mode for the batch executor
- Metrics and logging settings
"""

import os
from typing import Tuple

# =============================================================================
# API SERVER CONFIGURATION
# =============================================================================

SERVER_HOST: str = os.getenv("URL_BENCH_HOST", "0.0.0.0")
SERVER_PORT: int = int(os.getenv("URL_BENCH_PORT", "4044"))

# Route accepting a JSON array of request specifications
TEST_ROUTE: str = "/test/post"

# CORS headers attached to every API response
CORS_ALLOW_ORIGIN: str = "*"
CORS_ALLOW_METHODS: str = "GET, POST, PUT, DELETE, OPTIONS"
CORS_ALLOW_HEADERS: str = "Content-Type, Authorization"

# =============================================================================
# TIMEOUTS
# =============================================================================

ATTEMPT_TIMEOUT_SECONDS: float = float(os.getenv("URL_BENCH_ATTEMPT_TIMEOUT", "10"))
PROBE_TIMEOUT_SECONDS: float = float(os.getenv("URL_BENCH_PROBE_TIMEOUT", "5"))

# =============================================================================
# REACHABILITY HEURISTIC
# =============================================================================

# Hosts accepted without any further checks
LOCALHOST_NAME: str = "localhost"

# Inclusive length bounds for the last label of the host name
PSEUDO_TLD_LENGTH: Tuple[int, int] = (2, 6)

# Probe responses at or above this status mark the target unreachable
PROBE_MAX_STATUS: int = 400

# =============================================================================
# DISPATCH
# =============================================================================

DISPATCH_BATCH: str = "batch"  # Fixed batches of `concurrency`, drained in sequence
DISPATCH_POOL: str = "pool"  # Free-flowing gate of `concurrency` permits
DISPATCH_MODES: Tuple[str, str] = (DISPATCH_BATCH, DISPATCH_POOL)
DISPATCH_MODE: str = os.getenv("URL_BENCH_DISPATCH", DISPATCH_BATCH)

# =============================================================================
# HTTP STATUS CODES
# =============================================================================

HTTP_SUCCESS_MIN: int = 200
HTTP_SUCCESS_MAX: int = 300  # Exclusive

# Method used when a spec leaves it empty
DEFAULT_METHOD: str = "GET"

# Status reported for attempts that never produced a response
NO_RESPONSE_STATUS: int = 0

# =============================================================================
# OBSERVABILITY
# =============================================================================

METRICS_PORT: int = int(os.getenv("URL_BENCH_METRICS_PORT", "0"))  # 0 = disabled
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
LOG_FORMAT: str = "%(asctime)s - %(levelname)s - %(message)s"
