# marketplace/domain/errors.py


class MarketplaceError(Exception):
    """
    Bazowy wyjatek domeny.
    Kazda podklasa niesie kod HTTP, mapowany w create_app().
    """

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidRequest(MarketplaceError):
    status_code = 400
    default_message = "Invalid request"


class NotFound(MarketplaceError):
    status_code = 404
    default_message = "Not found"


class Conflict(MarketplaceError):
    # kontrakt API zwraca konflikty stanu jako 400
    status_code = 400
    default_message = "Conflict"


class Forbidden(MarketplaceError):
    status_code = 403
    default_message = "Forbidden"


class Unauthenticated(MarketplaceError):
    status_code = 401
    default_message = "Unauthorized"
