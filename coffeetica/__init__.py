"""
Coffeetica review client.

Review lifecycle, review feeds and rating aggregation on top of the
Coffeetica REST API.
"""

__version__ = '1.0.0'
