"""
Error types for the eligibility checker
"""
from enum import Enum


class EligibilityError(Exception):
    """Base class for all checker errors"""


class ValidationError(EligibilityError):
    """Address does not have the 40 hex character format"""


class TransportError(EligibilityError):
    """Remote contract call failed (network, endpoint or protocol)"""


class ConfigError(EligibilityError):
    """Configuration cannot work; reported before any batch starts"""


class FailureKind(Enum):
    """Why an address could not be resolved"""
    VALIDATION = "validation"
    TRANSPORT = "transport"
    UNEXPECTED = "unexpected"
