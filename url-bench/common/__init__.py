"""
Common utilities for the URL load tester.
"""

from .inflight_gate import InFlightGate

__all__ = ['InFlightGate']
