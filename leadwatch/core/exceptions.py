"""
Error kinds raised by the follow-up engine.

Per-lead scan failures are recorded on the scan result; everything else
propagates to the caller.
"""


class LeadwatchError(Exception):
    """Base class for engine errors."""
    pass


class NotFoundError(LeadwatchError):
    """Raised when a referenced entity does not exist."""

    def __init__(self, entity: str, entity_id: int):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} {entity_id} not found")


class ForbiddenError(LeadwatchError):
    """Raised when the caller is not the owner/recipient of a resource."""

    def __init__(self, entity: str, entity_id: int, caller_id: int):
        self.entity = entity
        self.entity_id = entity_id
        self.caller_id = caller_id
        super().__init__(f"User {caller_id} may not act on {entity} {entity_id}")


class InvalidArgumentError(LeadwatchError):
    """Raised for malformed filter values."""

    def __init__(self, field: str, reason: str):
        self.field = field
        self.reason = reason
        super().__init__(f"Invalid value for {field}: {reason}")


class TransientStorageError(LeadwatchError):
    """A storage failure while processing a single lead during a scan."""

    def __init__(self, lead_id: int, cause: Exception):
        self.lead_id = lead_id
        self.cause = cause
        super().__init__(f"Storage error while processing lead {lead_id}: {cause}")


class FatalScanError(LeadwatchError):
    """The candidate set could not be loaded; the whole scan is aborted."""
    pass
