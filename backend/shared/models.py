"""
Shared data models used across modules.

These models are shared infrastructure, not business logic.
Module-specific models should stay in their respective module directories.
"""

from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """
    Base for models that cross the network boundary.

    Python code uses snake_case; the JSON wire format uses camelCase.
    Both spellings are accepted on input.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


class AuthenticatedUser(BaseModel):
    """
    Represents an authenticated caller for the lifetime of one request.

    Populated from a verified access credential and made available to
    route handlers via dependency injection. Holds only what the access
    credential carries.
    """

    id: str = Field(..., description="User ID")
    email: str = Field(..., description="User's email address")
    expires_at: datetime = Field(..., description="When the access credential expires")

    model_config = {
        "frozen": True,  # Make immutable for safety
        "extra": "ignore",
    }
