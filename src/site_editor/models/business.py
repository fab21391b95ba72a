from __future__ import annotations

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class BusinessInfo(BaseModel):
    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "businessName": "Café Estelar",
                "businessType": "restaurante",
                "location": "Barcelona, España",
                "language": "Español",
            }
        },
    )

    name: str = Field(
        min_length=1,
        alias="businessName",
        validation_alias=AliasChoices("businessName", "name"),
    )
    type: str = Field(
        min_length=1,
        alias="businessType",
        validation_alias=AliasChoices("businessType", "type"),
    )
    location: str = Field(min_length=1)
    language: str = Field(default="Español")


__all__ = ["BusinessInfo"]
