"""
Version 1 of the API: storefront and back-office routes.
"""
