"""
Service layer abstraction.

Each service encapsulates business logic for a domain and works
against the document store handle it is constructed with, so API
handlers never touch persistence directly.
"""
