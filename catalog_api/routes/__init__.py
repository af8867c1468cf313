# Routes package init
"""
Catalog API — Routes Package
==============================

What:  HTTP route handlers that accept requests and return responses.

Route Inventory:
    - products.py: GET    /api/products                      (filter/sort/paginate)
                   GET    /api/products/search/suggestions   (search-as-you-type)
                   GET    /api/products/category/{category}  (category shelf)
                   GET    /api/products/featured             (featured shelf)
                   GET    /api/products/{id}                 (detail)
                   POST   /api/products                      (create)
                   PUT    /api/products/{id}                 (partial update)
                   DELETE /api/products/{id}                 (soft delete)
    - health.py:   GET    /health                            (service health check)

Design Principle:
    Routes are THIN: extract request data, call ProductService, return the
    envelope. Business rules live in the service and the query package.
"""
