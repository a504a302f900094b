"""Coupon, email campaign and banner schemas."""

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import Field

from models.common import CamelModel, EntityModel

CouponType = Literal["percentage", "fixed", "free_shipping"]
CampaignAudience = Literal["all", "new_customers", "returning_customers", "inactive", "custom"]
CampaignStatus = Literal["draft", "scheduled", "sent", "cancelled"]
BannerPosition = Literal["home_hero", "home_middle", "sidebar", "category_top", "custom"]


class Coupon(EntityModel):
    code: str = ""
    type: CouponType = "percentage"
    value: float = 0.0
    min_purchase: Optional[float] = None
    max_uses: Optional[int] = None
    used_count: int = 0
    valid_from: Optional[datetime] = None
    valid_to: Optional[datetime] = None
    is_active: bool = False
    products: List[str] = Field(default_factory=list)
    categories: List[str] = Field(default_factory=list)
    created_at: Optional[datetime] = None

    def is_redeemable(self, now: datetime, subtotal: float) -> bool:
        if not self.is_active:
            return False
        if self.valid_from and now < self.valid_from:
            return False
        if self.valid_to and now > self.valid_to:
            return False
        if self.max_uses is not None and self.used_count >= self.max_uses:
            return False
        return self.min_purchase is None or subtotal >= self.min_purchase


class CouponWrite(CamelModel):
    code: Optional[str] = None
    type: Optional[CouponType] = None
    value: Optional[float] = None
    min_purchase: Optional[float] = None
    max_uses: Optional[int] = None
    valid_from: Optional[datetime] = None
    valid_to: Optional[datetime] = None
    is_active: Optional[bool] = None
    products: Optional[List[str]] = None
    categories: Optional[List[str]] = None


class EmailCampaign(EntityModel):
    name: str = ""
    subject: str = ""
    content: str = ""
    audience: CampaignAudience = "all"
    custom_audience: List[str] = Field(default_factory=list)
    status: CampaignStatus = "draft"
    scheduled_date: Optional[datetime] = None
    sent_date: Optional[datetime] = None
    open_rate: Optional[float] = None
    click_rate: Optional[float] = None
    created_at: Optional[datetime] = None


class EmailCampaignWrite(CamelModel):
    name: Optional[str] = None
    subject: Optional[str] = None
    content: Optional[str] = None
    audience: Optional[CampaignAudience] = None
    custom_audience: Optional[List[str]] = None
    status: Optional[CampaignStatus] = None
    scheduled_date: Optional[datetime] = None


class Banner(EntityModel):
    title: str = ""
    image: str = ""
    link: str = ""
    position: BannerPosition = "home_hero"
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    is_active: bool = False
    created_at: Optional[datetime] = None


class BannerWrite(CamelModel):
    title: Optional[str] = None
    image: Optional[str] = None
    link: Optional[str] = None
    position: Optional[BannerPosition] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    is_active: Optional[bool] = None
