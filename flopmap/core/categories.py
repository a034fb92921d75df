"""Place categories queried by default and their display metadata."""

from collections import namedtuple
from types import MappingProxyType
from typing import Iterable, List

CategoryInfo = namedtuple("CategoryInfo", ["label", "icon"])

CATEGORIES = MappingProxyType(
    {
        "restaurant": CategoryInfo("Restaurant", "🍽️"),
        "cafe": CategoryInfo("Café", "☕"),
        "bar": CategoryInfo("Bar", "🍺"),
        "hotel": CategoryInfo("Hôtel", "🏨"),
        "store": CategoryInfo("Magasin", "🏪"),
        "gas_station": CategoryInfo("Station essence", "⛽"),
        "pharmacy": CategoryInfo("Pharmacie", "💊"),
        "bank": CategoryInfo("Banque", "🏦"),
        "beauty_salon": CategoryInfo("Salon de beauté", "💄"),
        "hospital": CategoryInfo("Hôpital", "🏥"),
    }
)

DEFAULT_CATEGORIES = tuple(CATEGORIES)


def describe_types(types: Iterable[str], limit: int = 2) -> List[str]:
    """Display labels for the first ``limit`` types; unknown tags pass through."""
    labels = []
    for type_name in list(types or [])[:limit]:
        info = CATEGORIES.get(type_name)
        labels.append(f"{info.icon} {info.label}" if info else type_name)
    return labels
