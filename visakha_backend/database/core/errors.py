"""
Domain errors raised by the service layer.

Routers translate these into HTTP responses:
- `NotFoundError`          → 404
- `InvalidRequestError`    → 400 (includes `InvalidIdentifierError`)

Store faults are left as SQLAlchemy exceptions and surface as 500.
"""


class NotFoundError(Exception):
    """The addressed conversation, entry, member or document does not exist."""

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class InvalidRequestError(Exception):
    """The request is missing a required field or carries a wrongly typed one."""

    def __init__(self, detail: str, message: str | None = None):
        super().__init__(message or detail)
        self.detail = detail
        self.message = message


class InvalidIdentifierError(InvalidRequestError):
    def __init__(self, field: str, value):
        super().__init__("Invalid ID", f"{field} is not a valid identifier: {value!r}")
        self.field = field
        self.value = value
