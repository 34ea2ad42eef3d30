"""
civicsphere/classification/categorizer.py

Weighted keyword categorization of notice text.
"""

from __future__ import annotations

from dataclasses import dataclass

GENERAL_CATEGORY = "general"
PRIMARY_WEIGHT = 3.0
SECONDARY_WEIGHT = 1.5
TITLE_PRIMARY_BONUS = 2.0
TITLE_SECONDARY_BONUS = 1.0
MIN_SCORE = 2.0


@dataclass(frozen=True)
class CategoryDefinition:
    name: str
    primary: tuple[str, ...]
    secondary: tuple[str, ...]


# Definition order decides ties.
CATEGORIES: tuple[CategoryDefinition, ...] = (
    CategoryDefinition(
        name="health",
        primary=(
            "health", "medical", "hospital", "doctor", "medicine", "vaccine", "covid",
            "disease", "healthcare", "clinic", "treatment", "patient", "drug", "pharmacy",
            "ayush", "medical college", "nursing", "ambulance",
        ),
        secondary=("wellness", "mental health", "therapy", "diagnosis", "surgery", "emergency"),
    ),
    CategoryDefinition(
        name="education",
        primary=(
            "education", "school", "college", "university", "student", "exam", "admission",
            "scholarship", "degree", "certificate", "academic", "learning", "teacher",
            "faculty", "curriculum", "ugc", "cbse", "icse", "board", "entrance",
        ),
        secondary=("study", "research", "training", "course", "syllabus", "marks", "grade"),
    ),
    CategoryDefinition(
        name="employment",
        primary=(
            "job", "employment", "recruitment", "vacancy", "career", "hiring", "work",
            "salary", "wage", "pension", "retirement", "ssc", "upsc", "railway",
            "government job", "application", "interview", "selection", "posting",
        ),
        secondary=("employee", "employer", "staff", "officer", "clerk", "manager", "director"),
    ),
    CategoryDefinition(
        name="taxation",
        primary=(
            "tax", "gst", "income tax", "return", "refund", "assessment", "compliance", "tds",
            "advance tax", "penalty", "notice", "audit", "exemption", "deduction", "itr",
            "pan", "aadhaar",
        ),
        secondary=("financial", "revenue", "duty", "customs", "excise", "service tax"),
    ),
    CategoryDefinition(
        name="legal",
        primary=(
            "legal", "court", "law", "act", "rule", "regulation", "policy", "order",
            "judgment", "case", "litigation", "advocate", "lawyer", "justice",
            "supreme court", "high court", "tribunal", "amendment", "bill",
        ),
        secondary=("rights", "constitution", "statute", "ordinance", "notification", "circular"),
    ),
    CategoryDefinition(
        name="welfare",
        primary=(
            "welfare", "scheme", "benefit", "subsidy", "allowance", "grant", "aid", "support",
            "assistance", "relief", "compensation", "pension", "insurance", "social security",
            "disability", "widow", "elderly", "child",
        ),
        secondary=("help", "care", "protection", "safety", "security", "family"),
    ),
    CategoryDefinition(
        name="infrastructure",
        primary=(
            "infrastructure", "road", "bridge", "transport", "railway", "airport", "port",
            "construction", "development", "project", "tender", "contract", "electricity",
            "water", "sewage", "metro", "bus",
        ),
        secondary=("building", "facility", "maintenance", "repair", "upgrade", "expansion"),
    ),
    CategoryDefinition(
        name="agriculture",
        primary=(
            "agriculture", "farmer", "crop", "farming", "irrigation", "fertilizer", "seed",
            "harvest", "rural", "village", "kisan", "mandi", "procurement", "subsidy", "loan",
        ),
        secondary=("weather", "drought", "flood", "soil", "organic", "pesticide", "cattle"),
    ),
    CategoryDefinition(
        name="finance",
        primary=(
            "finance", "bank", "banking", "loan", "credit", "investment", "budget", "fund",
            "money", "financial", "economic", "economy", "market", "stock", "bond",
        ),
        secondary=("interest", "deposit", "account", "transaction", "payment", "currency"),
    ),
    CategoryDefinition(
        name="environment",
        primary=(
            "environment", "pollution", "climate", "green", "forest", "wildlife",
            "conservation", "renewable", "solar", "wind", "waste", "recycling",
        ),
        secondary=("nature", "ecology", "sustainable", "carbon", "emission", "clean"),
    ),
)

CATEGORY_LABELS: tuple[str, ...] = tuple(
    sorted({definition.name for definition in CATEGORIES} | {GENERAL_CATEGORY})
)


def _count_hits(keywords: tuple[str, ...], text: str) -> int:
    return sum(1 for keyword in keywords if keyword in text)


def score_categories(
    title: str,
    content: str,
    categories: tuple[CategoryDefinition, ...] = CATEGORIES,
) -> dict[str, float]:
    """
    Score every category with at least one keyword hit, in definition order.
    """

    text = f"{title} {content}".lower()
    title_text = title.lower()

    scores: dict[str, float] = {}
    for definition in categories:
        score = _count_hits(definition.primary, text) * PRIMARY_WEIGHT
        score += _count_hits(definition.secondary, text) * SECONDARY_WEIGHT
        score += _count_hits(definition.primary, title_text) * TITLE_PRIMARY_BONUS
        score += _count_hits(definition.secondary, title_text) * TITLE_SECONDARY_BONUS
        if score > 0:
            scores[definition.name] = score
    return scores


def categorize(
    title: str,
    content: str,
    categories: tuple[CategoryDefinition, ...] = CATEGORIES,
) -> str:
    """
    Return the best-scoring category label, or "general" below the threshold.
    """

    best_name = GENERAL_CATEGORY
    best_score = 0.0
    for name, score in score_categories(title or "", content or "", categories).items():
        if score > best_score:
            best_name = name
            best_score = score

    if best_score < MIN_SCORE:
        return GENERAL_CATEGORY
    return best_name
