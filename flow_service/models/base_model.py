"""
Base model classes shared by the API request schemas.
"""

from typing import Annotated

from pydantic import BaseModel, Field

# String that must carry at least one character
NonEmptyStr = Annotated[str, Field(min_length=1)]


class BaseRequestModel(BaseModel):
    """
    Base model for API request bodies.

    Fields use snake_case attributes with the camelCase names the builder
    frontend sends as aliases; either spelling is accepted.
    """

    class Config:
        populate_by_name = True
        extra = "ignore"
