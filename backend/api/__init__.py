"""
Identity API package.

Composition root for the FastAPI application: application factory,
service container, exception handlers and health routes. Import the app
from api.app.
"""
