"""Services for coffees business logic."""

from .exceptions import (
    CoffeesServiceError,
    CoffeeNotFoundError,
)
from .rating_aggregation import (
    CoffeeAggregate,
    get_coffee_aggregate,
    get_coffee_details,
    get_coffee_by_id,
)

__all__ = [
    # Exceptions
    'CoffeesServiceError',
    'CoffeeNotFoundError',
    # Rating Aggregation
    'CoffeeAggregate',
    'get_coffee_aggregate',
    'get_coffee_details',
    'get_coffee_by_id',
]
