"""
Notice classification exports.
"""

from civicsphere.classification.categorizer import (
    CATEGORIES,
    CATEGORY_LABELS,
    GENERAL_CATEGORY,
    CategoryDefinition,
    categorize,
    score_categories,
)

__all__ = [
    "CATEGORIES",
    "CATEGORY_LABELS",
    "GENERAL_CATEGORY",
    "CategoryDefinition",
    "categorize",
    "score_categories",
]
