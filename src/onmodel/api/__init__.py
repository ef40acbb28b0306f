"""On-Model Studio — FastAPI REST API layer.

This package contains the FastAPI application, the Pydantic request models,
and the multipart form parsing for generation requests.

Modules
-------
main
    FastAPI application with all route handlers and the ``main()`` CLI
    entry point.
models
    Pydantic models for API request validation.
uploads
    Reference image and JSON payload decoding for ``POST /api/generate``.
"""
