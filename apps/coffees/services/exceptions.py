"""Domain-specific exceptions for coffees services."""


class CoffeesServiceError(Exception):
    """Base exception for coffees services."""
    pass


class CoffeeNotFoundError(CoffeesServiceError):
    """Raised when coffee does not exist or is inactive."""
    pass
