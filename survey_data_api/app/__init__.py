"""
Application package initializer.

The service is split into ``core`` (configuration, logging, the
record store handle), ``schemas`` (request and response models),
``services`` (the record gateway) and ``api`` (HTTP routes).  The
ASGI application itself is built in ``main``.
"""
