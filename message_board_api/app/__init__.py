"""
Application package initializer.

This package contains the API server and all of its submodules.  The
code is organised into ``core`` (configuration, security, persistence
and the validation/authorization rules), ``schemas`` (request and
response bodies), ``services`` (storage and business logic) and
``api`` (versioned HTTP routers).  The application itself lives in
``main`` and is not imported here, so the client can reuse ``core``
and ``schemas`` without building a server.
"""
