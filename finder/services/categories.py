"""Free-form category labels to canonical catalog taxonomy codes."""

from __future__ import annotations

from finder.domain.models import ALL_CATEGORIES

CATEGORY_CODES: tuple[str, ...] = (
    "plumbing", "electrical", "cleaning", "painting", "gardening",
    "repair", "transport", "security", "education", "food",
    "beauty", "health", "construction", "roofing", "maintenance",
    "legal", "accounting", "automotive", "technology", "business",
    "pet", "pest", "marketing", "medical", "dental", "fitness",
    "tutoring", "language", "event", "photography", "entertainment",
    "financial", "insurance", "other",
)

# Ordered; the first rule with a fragment contained in the label wins.
CATEGORY_RULES: tuple[tuple[tuple[str, ...], str], ...] = (
    (("plumb",), "plumbing"),
    (("electric",), "electrical"),
    (("clean",), "cleaning"),
    (("food",), "food"),
    (("construct",), "construction"),
    (("transport",), "transport"),
    (("security",), "security"),
    (("pest",), "pest"),
    (("pets", "pet"), "pet"),
    (("paint",), "painting"),
    (("garden", "landscap"), "gardening"),
    (("repair", "fix"), "repair"),
    (("maint",), "maintenance"),
    (("roof",), "roofing"),
    (("legal", "law"), "legal"),
    (("accounting", "finance", "tax"), "accounting"),
    (("medical", "healthcare"), "medical"),
    (("automotive", "car", "auto"), "automotive"),
    (("fitness", "gym", "workout"), "fitness"),
    (("technology", "tech", "web", "app", "software"), "technology"),
    (("business", "consulting"), "business"),
    (("marketing", "advertising"), "marketing"),
    (("dental", "dentist"), "dental"),
    (("tutoring", "tutor"), "tutoring"),
    (("language", "linguistic"), "language"),
    (("event", "party"), "event"),
    (("photography", "photo"), "photography"),
    (("entertainment", "dj", "music"), "entertainment"),
    (("financial", "investment"), "financial"),
    (("insurance",), "insurance"),
    (("health", "wellness"), "health"),
    (("beauty", "salon", "spa"), "beauty"),
    (("education", "school", "learning"), "education"),
    (("other",), "other"),
)

_UNCONSTRAINED_LABELS = frozenset({"", ALL_CATEGORIES, "all categories", "view-all"})

CATEGORY_DISPLAY_NAMES: dict[str, str] = {
    "plumbing": "Plumbing",
    "electrical": "Electrical",
    "cleaning": "Cleaning",
    "food": "Food",
    "construction": "Construction",
    "transport": "Transport",
    "security": "Security",
    "pet": "Pet Services",
    "pest": "Pest Control",
    "technology": "Technology & IT",
    "event": "Events",
}


def map_category(label: str | None) -> str:
    """Return the taxonomy code for ``label``, or ``""`` for no constraint."""

    key = (label or "").strip().lower()
    if key in _UNCONSTRAINED_LABELS:
        return ""
    if key in CATEGORY_CODES:
        return key
    for fragments, code in CATEGORY_RULES:
        if any(fragment in key for fragment in fragments):
            return code
    return ""


def normalize_category(label: str | None) -> str:
    """Like :func:`map_category` but returns ``"all"`` instead of ``""``."""

    return map_category(label) or ALL_CATEGORIES


def category_display_name(code: str) -> str:
    if code in CATEGORY_DISPLAY_NAMES:
        return CATEGORY_DISPLAY_NAMES[code]
    if code == ALL_CATEGORIES:
        return "All"
    return code.replace("-", " ").title()


__all__ = [
    "CATEGORY_CODES",
    "CATEGORY_RULES",
    "category_display_name",
    "map_category",
    "normalize_category",
]
