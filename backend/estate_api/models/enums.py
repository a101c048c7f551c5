"""Closed enumerations shared by the ORM models and API schemas.

Each member's value is its wire and storage encoding. Columns store the
plain string, so validation happens here and in the pydantic schemas rather
than in a database enum type.
"""

from enum import StrEnum


class AgentRole(StrEnum):
    ADMIN = "Admin"
    AGENT = "Agent"


class PurchaseStatus(StrEnum):
    FOR_SALE = "ForSale"
    FOR_RENT = "ForRent"
    FOR_SALE_OR_RENT = "ForSaleOrRent"

    def to_slug(self) -> str:
        return _PURCHASE_SLUGS[self]


_PURCHASE_SLUGS = {
    PurchaseStatus.FOR_SALE: "for-sale",
    PurchaseStatus.FOR_RENT: "for-rent",
    PurchaseStatus.FOR_SALE_OR_RENT: "for-sale-or-rent",
}


class SoldStatus(StrEnum):
    AVAILABLE = "Available"
    SOLD = "Sold"


class BuildingCondition(StrEnum):
    NEW = "New"
    GOOD = "Good"
    RENOVATED = "Renovated"
    RENOVATION_NEEDED = "RenovationNeeded"


class FurnitureCapacity(StrEnum):
    FURNISHED = "Furnished"
    SEMI_FURNISHED = "SemiFurnished"
    UNFURNISHED = "Unfurnished"


class SoldChannel(StrEnum):
    INTERNAL = "Internal"
    EXTERNAL = "External"


class Currency(StrEnum):
    IDR = "IDR"
    USD = "USD"


class RentTime(StrEnum):
    MONTHLY = "Monthly"
    YEARLY = "Yearly"
