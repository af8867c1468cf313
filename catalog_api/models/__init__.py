# Models package init
"""
Catalog API — ORM Models
==========================

Importing the package registers every mapped class, so string-named
relationships (Product.vendor, Product.reviews) always resolve.
"""

from catalog_api.models.product import Product
from catalog_api.models.review import Review
from catalog_api.models.user import User

__all__ = ["Product", "Review", "User"]
