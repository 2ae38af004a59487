"""
Data model for the URL load tester.
"""

from .request import AttemptOutcome, RequestSpec, ResultRecord, SpecValidationError, parse_specs

__all__ = ['AttemptOutcome', 'RequestSpec', 'ResultRecord', 'SpecValidationError', 'parse_specs']
