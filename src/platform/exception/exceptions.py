class CustomBaseError(Exception):
    """Base class for all custom exceptions - controls logging behavior in @Logger.io

    `code` is the stable machine-readable identifier returned to callers next to `detail`.
    """

    default_code: str | None = None

    def __init__(self, message: str, status_code: int, *, code: str | None = None) -> None:
        self.message = message
        self.status_code = status_code
        self.code = code or self.default_code
        super().__init__(message)

    def to_content(self) -> dict[str, str]:
        content = {'detail': self.message}
        if self.code:
            content['code'] = str(self.code)
        return content


class DomainError(CustomBaseError):
    default_code = 'INVALID_INPUT'

    def __init__(self, message: str, status_code: int = 400) -> None:
        super().__init__(message, status_code)


class NotFoundError(CustomBaseError):
    default_code = 'NOT_FOUND'

    def __init__(self, message: str) -> None:
        super().__init__(message, 404)


class ConflictError(CustomBaseError):
    """Seat-map and inventory conflicts; reported with the CONFLICT code when not translated."""

    default_code = 'CONFLICT'

    def __init__(self, message: str) -> None:
        super().__init__(message, 409)
