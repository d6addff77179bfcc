"""
HTTP API package.
Run with: uvicorn api.server:create_app --factory
"""
