"""
Catalog API — Application Package
===================================

HTTP CRUD layer over an e-commerce product catalog.

Architecture:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │         Services (Business Logic)   │  ← composition, envelopes
    ├─────────────────────────────────────┤
    │   Query (filter / sort / paginate)  │  ← pure translation of query strings
    ├─────────────────────────────────────┤
    │       Repositories (SQL)            │  ← the only layer that builds SQL
    ├─────────────────────────────────────┤
    │   Models & Schemas · Database       │  ← SQLAlchemy ORM + Pydantic
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
