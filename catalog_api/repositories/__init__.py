# Repositories package init
"""
Catalog API — Repositories Package
====================================

What:  Database access objects. Each repository wraps one AsyncSession and
       is the only layer that builds SQL.

Inventory:
    - product_repository.py: filtered/sorted/paged reads, text search,
                             sku-safe writes, soft delete
"""
