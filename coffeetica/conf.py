"""Client settings, read from the environment or a .env file."""

from decouple import config

API_URL = config('COFFEETICA_API_URL', default='http://localhost:8000/api')
REQUEST_TIMEOUT = config('COFFEETICA_REQUEST_TIMEOUT', default=10.0, cast=float)

# Reviews per page on the "all reviews" views
FEED_PAGE_SIZE = config('COFFEETICA_FEED_PAGE_SIZE', default=3, cast=int)

# Size of the latest-reviews slice when derived locally
LATEST_REVIEWS_LIMIT = config('COFFEETICA_LATEST_REVIEWS_LIMIT', default=3, cast=int)
