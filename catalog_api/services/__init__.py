# Services package init
"""
Catalog API — Services Layer
==============================

What:  Business logic between routes (HTTP) and repositories (SQL).
Why:   Routes handle HTTP; services compose the query layer with the
       repository and shape the response envelope.

Service Inventory:
    - ProductService: listing, lookup, create/update/soft-delete,
                      search suggestions, category and featured shelves
"""
