"""
CRM Admin - Service Errors

NotFound covers both a missing entity and one that fails a precondition
(wrong status or role); callers cannot tell the two apart.
"""


class AdminServiceError(Exception):
    """Base class for admin service errors."""


class ResourceNotFoundError(AdminServiceError):
    """Raised when an entity is missing or not a valid target for the operation."""


class InvalidArgumentError(AdminServiceError):
    """Raised when supplied data violates domain rules."""
