"""
Application package initializer.

This package contains the main entrypoint for the API and its
submodules: ``core`` (configuration, logging, the document store and
shared helpers), ``schemas`` (request and response models),
``services`` (business logic) and ``api`` (HTTP routes).
"""

from .main import app, create_app  # noqa: F401
