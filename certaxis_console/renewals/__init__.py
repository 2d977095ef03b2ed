"""
Renewals module - certificate renewal requests
"""

from .workflow import (
    RenewalRequest,
    RenewalWorkflow,
    RenewalError,
    RenewalValidationError,
    UnknownRenewalError,
    validate_renewal_form,
)

__all__ = [
    "RenewalRequest",
    "RenewalWorkflow",
    "RenewalError",
    "RenewalValidationError",
    "UnknownRenewalError",
    "validate_renewal_form",
]
