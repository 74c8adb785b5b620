"""
Electricity Price API - Authenticated regional price aggregation service

A small service that issues bearer tokens to configured users and answers
mean-price queries over an in-memory dataset of electricity price records.

Main components:
- Credential store and JWT token issuer
- In-memory price dataset service with atomic reloads
- Bearer token verification gate for protected routes
- Domain exceptions for clear error handling
"""

__version__ = "1.0.0"
