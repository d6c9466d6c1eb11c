"""Protectable entity names."""

from enum import StrEnum

from rolegate.domain.exceptions import ValidationError


class EntityName(StrEnum):
    """Closed set of resources a permission record can target."""

    USER = "User"
    BRAND = "Brand"
    CATEGORY = "Category"
    PERMISSION = "Permission"
    PRODUCT = "Product"
    PRODUCT_REVIEW = "Product Review"
    SHIPPING_CLASS = "Shipping Class"
    SUB_CATEGORY = "Sub Category"
    TAX_CLASS = "Tax Class"
    TAX_STATUS = "Tax Status"
    FAQ = "FAQ"
    NEWS_LETTER = "News Letter"
    POP_UP_BANNER = "Pop Up Banner"
    PRIVACY_POLICY = "Privacy & Policy"
    TERMS_CONDITIONS = "Terms & Conditions"
    ORDER = "Order"
    ROLE = "Role"
    NOTIFICATION = "Notification"
    MEDIA = "Media"

    @classmethod
    def parse(cls, value: str) -> "EntityName":
        """Case-insensitive lookup; raises ValidationError for unknown names."""
        wanted = value.strip().lower()
        for member in cls:
            if member.value.lower() == wanted:
                return member
        raise ValidationError(f"Invalid permission name: {value}")
