"""Error taxonomy shared by stores, services, the HTTP API and the client facade."""


class InventoryError(Exception):
    """Base class. ``status_code`` is the HTTP status the API answers with."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(InventoryError):
    """Missing or invalid field. Reported to the caller, never retried."""

    status_code = 400


class NotFoundError(InventoryError):
    status_code = 404


class ConnectivityError(InventoryError):
    """The relational medium cannot be reached."""

    status_code = 503


class MediumCorruptError(InventoryError):
    """Stored payload is not valid serialized data. Stores recover by reseeding."""

    status_code = 500


class PayloadTooLargeError(InventoryError):
    status_code = 413


class UnsupportedMediaError(InventoryError):
    status_code = 415
