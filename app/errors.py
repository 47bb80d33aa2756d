class StoreError(Exception):
    """Store medium unreachable, or it returned something we cannot use."""


class UnauthorizedError(Exception):
    """Shared secret rejected on a write or delete."""


class PayloadError(ValueError):
    pass
