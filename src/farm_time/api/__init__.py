"""FastAPI application and routes.

This module provides the REST API for planning farm gatherings.

## API Structure

- /auth - Authentication endpoints (Google OAuth)
- /api/admin/users - User permission management (admin only)
- /api/events - Events, with nested attendees, meals and todos

## Authentication

Everything under /api requires a session cookie. Sessions are created during
OAuth login.
"""

from farm_time.api.app import create_app

__all__ = ["create_app"]
