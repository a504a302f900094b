"""Site configuration, navigation and custom page schemas."""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import Field

from models.common import CamelModel, EntityModel


class ColorScheme(CamelModel):
    primary: str = "#BD9526"
    secondary: str = "#14452F"
    accent: str = "#FFFFFF"
    background: str = "#000000"
    text: str = "#FFFFFF"


class Fonts(CamelModel):
    heading: str = "Inter, sans-serif"
    body: str = "Inter, sans-serif"


class Hero(CamelModel):
    title: str = "Premium Quality Apparel"
    subtitle: str = "Exclusive designs for the true believers"
    image: str = "/glowing-lamp/TrueBeliever.jpg"
    button_text: str = "Shop Now"
    button_link: str = "/products"


class SocialLinks(CamelModel):
    instagram: Optional[str] = "https://instagram.com/believeinthedesigns"
    facebook: Optional[str] = None
    twitter: Optional[str] = None
    tiktok: Optional[str] = None
    youtube: Optional[str] = None


class ContactInfo(CamelModel):
    email: str = "info@believeinthedesigns.com"
    phone: Optional[str] = None
    address: Optional[str] = None


class FooterLink(CamelModel):
    text: str
    url: str


class FooterColumn(CamelModel):
    title: str
    links: List[FooterLink] = Field(default_factory=list)


def _default_footer_columns() -> List[FooterColumn]:
    def column(title, links):
        return FooterColumn(title=title, links=[FooterLink(text=t, url=u) for t, u in links])

    return [
        column("Shop", [("All Products", "/products"), ("Categories", "/categories"),
                        ("Featured", "/products?featured=true")]),
        column("Information", [("About Us", "/about"), ("Contact", "/contact"), ("FAQ", "/faq")]),
        column("Account", [("My Account", "/profile"), ("My Orders", "/profile/orders"),
                           ("Wishlist", "/wishlist")]),
    ]


class Footer(CamelModel):
    columns: List[FooterColumn] = Field(default_factory=_default_footer_columns)
    bottom_text: str = "© 2025 Believe in the Designs. All rights reserved."


class SiteConfig(CamelModel):
    """The single ``config/site`` document. Every field has a storefront default."""

    name: str = "Believe in the Designs"
    logo: str = "/glowing-lamp/logo.png"
    favicon: str = "/favicon.ico"
    colors: ColorScheme = Field(default_factory=ColorScheme)
    fonts: Fonts = Field(default_factory=Fonts)
    hero: Hero = Field(default_factory=Hero)
    featured_products: List[str] = Field(default_factory=list)
    featured_categories: List[str] = Field(default_factory=list)
    social: SocialLinks = Field(default_factory=SocialLinks)
    contact: ContactInfo = Field(default_factory=ContactInfo)
    footer: Footer = Field(default_factory=Footer)
    updated_at: Optional[datetime] = None

    @classmethod
    def from_document(cls, data: dict) -> "SiteConfig":
        return cls.model_validate(data)

    def to_full_document(self) -> dict:
        return self.model_dump(by_alias=True, exclude={"updated_at"})


class SiteConfigUpdate(CamelModel):
    name: Optional[str] = None
    logo: Optional[str] = None
    favicon: Optional[str] = None
    colors: Optional[ColorScheme] = None
    fonts: Optional[Fonts] = None
    hero: Optional[Hero] = None
    featured_products: Optional[List[str]] = None
    featured_categories: Optional[List[str]] = None
    social: Optional[SocialLinks] = None
    contact: Optional[ContactInfo] = None
    footer: Optional[Footer] = None


class NavigationItem(EntityModel):
    title: str = ""
    url: str = ""
    is_external: bool = False
    children: List[Dict[str, Any]] = Field(default_factory=list)
    order: int = 0
    deleted: bool = False


class NavigationItemWrite(CamelModel):
    title: Optional[str] = None
    url: Optional[str] = None
    is_external: Optional[bool] = None
    order: Optional[int] = None


class CustomPage(EntityModel):
    title: str = ""
    slug: str = ""
    content: str = ""
    meta_title: Optional[str] = None
    meta_description: Optional[str] = None
    is_published: bool = False
    deleted: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class CustomPageCreate(CamelModel):
    title: str
    slug: str
    content: str = ""
    meta_title: Optional[str] = None
    meta_description: Optional[str] = None
    is_published: bool = False

    def to_document(self):
        return self.model_dump(by_alias=True, exclude_none=True)


class CustomPageUpdate(CamelModel):
    title: Optional[str] = None
    slug: Optional[str] = None
    content: Optional[str] = None
    meta_title: Optional[str] = None
    meta_description: Optional[str] = None
    is_published: Optional[bool] = None
