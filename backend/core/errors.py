import asyncio

from sqlalchemy.exc import SQLAlchemyError

PROCESSING_ERROR = "Processing error, try again later"

# Anything the store or its connection can raise; timeouts count as store failures.
STORE_FAILURES = (SQLAlchemyError, OSError, asyncio.TimeoutError)


class StoreError(Exception):
    """The catalog store could not complete an operation.

    Carries only a generic message; the underlying cause is logged where it
    is caught and kept on ``__cause__``.
    """

    def __init__(self, message: str = PROCESSING_ERROR):
        super().__init__(message)
