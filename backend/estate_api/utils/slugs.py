from __future__ import annotations

from estate_api.models.enums import PurchaseStatus


def slugify(value: str) -> str:
    """``"  Jalan Raya "`` -> ``"jalan-raya"``."""
    return value.strip().replace(" ", "-").lower()


def build_site_path(
    purchase_status: PurchaseStatus,
    building_type: str,
    province: str,
    regency: str,
    street: str,
) -> str:
    segments = [
        purchase_status.to_slug(),
        slugify(building_type),
        slugify(province),
        slugify(regency),
        slugify(street),
    ]
    return "/" + "/".join(segments)


def path_prefix(purchase_status: PurchaseStatus, *segments: str) -> str:
    """Sitemap prefix such as ``/for-sale/villa/bali``."""
    parts = [purchase_status.to_slug(), *(s.replace(" ", "-") for s in segments)]
    return "/" + "/".join(parts)
