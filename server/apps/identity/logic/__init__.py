"""Business logic layer for identity app.

This package contains the bearer token authentication core:
- Token hashing and credential extraction
- Token store lookup and principal resolution
- Token issuance, revocation and expiry policy

Django views and middleware call into this layer; it does not
depend on the request/response cycle.
"""
