"""
Core infrastructure: settings, logging, the document store, the error
taxonomy and date/number helpers shared by the services.
"""
