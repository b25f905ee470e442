"""
Service layer.

Each service is bound to a ``Database`` and holds the business rules of
one domain, so route handlers stay thin.
"""
