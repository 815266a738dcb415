"""
Catalog API integration.

Responsibilities:
- Shared Restaurant / MenuItem models sent to the catalog.
- Async client for restaurant search, create, update, menu lookup and
  bulk item replacement.
"""
