"""
Exceptions raised by delivery-gates.

The evaluators themselves never raise on malformed workflow data; these
cover the surrounding configuration layer.
"""


class DeliveryGatesError(Exception):
    """Base exception for delivery-gates errors"""
    pass


class ConfigurationError(DeliveryGatesError):
    """Configuration is invalid"""
    pass
