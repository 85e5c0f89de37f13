class StorageLocationError(ValueError):
    """Base error for storage location operations, carries the HTTP status to report"""
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class LocationValidationError(StorageLocationError):
    """Missing or malformed input"""
    status_code = 400


class LocationConflictError(StorageLocationError):
    """Slot code already taken or service detail already placed"""
    status_code = 400


class LocationNotFoundError(StorageLocationError):
    """Service detail, order or employee does not exist"""
    status_code = 404
