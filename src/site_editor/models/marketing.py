from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _CampaignPart(BaseModel):
    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)


class GoogleAd(_CampaignPart):
    headline: str = Field(description="At most 30 characters")
    description: str = Field(description="At most 90 characters")
    cta: str


class FacebookPost(_CampaignPart):
    text: str
    image_description: str


class CampaignEmail(_CampaignPart):
    subject: str
    body: str


class MarketingCampaign(_CampaignPart):
    google_ad: GoogleAd
    facebook_post: FacebookPost
    email: CampaignEmail


__all__ = ["CampaignEmail", "FacebookPost", "GoogleAd", "MarketingCampaign"]
