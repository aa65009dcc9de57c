class GridlockError(Exception):
    """Base exception class for gridlock errors."""
    pass

class VehicleNotFound(GridlockError, ValueError):
    """Raised when a vehicle id is not on the board."""
    pass

class InvalidLayout(GridlockError, ValueError):
    """Raised when a starting layout or level file is not a legal board."""
    pass

class InvalidDirection(GridlockError):
    """Raised when a move direction does not match the vehicle orientation."""
    pass
