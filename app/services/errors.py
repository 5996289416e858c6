class ProductAPIError(Exception):
    """Base error carrying the HTTP status and the message shown to the caller."""

    status_code = 500

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationError(ProductAPIError):
    status_code = 400


class AuthorizationRequiredError(ProductAPIError):
    status_code = 401


class ForbiddenError(ProductAPIError):
    status_code = 403


class ProductNotFoundError(ProductAPIError):
    status_code = 404

    def __init__(self, message: str = "Product not found"):
        super().__init__(message)


class StoreError(ProductAPIError):
    # The message is generic; the driver error stays in the server log.
    status_code = 500


class DatabaseUnavailableError(ProductAPIError):
    status_code = 500

    def __init__(self, message: str = "Database connection failed"):
        super().__init__(message)
