# marketplace/application/dtos/base_dto.py

"""
Base class for the application DTOs.

This module defines CustomBaseModel, which extends Pydantic's BaseModel
with the configuration shared by every DTO of the application.
"""

from pydantic import BaseModel, ConfigDict


class CustomBaseModel(BaseModel):
    """
    Base model for every DTO of the application.

    DTOs can be built straight from domain objects (``from_attributes``).
    """

    model_config = ConfigDict(from_attributes=True)
