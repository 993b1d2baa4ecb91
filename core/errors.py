# Error taxonomy shared by services and routers


class EduWalletError(Exception):
    """Base class for all application errors."""


class ValidationError(EduWalletError, ValueError):
    """
    Invalid input caught before any write.
    Subclasses ValueError so pydantic validators surface it as a 422.
    """


class StoreError(EduWalletError):
    """The record store rejected a read or a write."""


class RecordNotFoundError(StoreError):
    pass


class RecordAccessError(StoreError):
    """The record exists but belongs to another user."""


class DispatchError(EduWalletError):
    """The email relay was unreachable or reported a failure."""
