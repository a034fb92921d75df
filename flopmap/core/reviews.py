"""Review selection: crunchiness scoring, anonymization and relative dates.

Reviews are requested from the provider in French, so the keyword lists are
mostly French with a handful of English equivalents for tourist-heavy areas.
"""

import logging
import re
import time
from typing import Iterable, List, Optional

import phonenumbers

from flopmap.core.models import Review, ScoredReview

logger = logging.getLogger(__name__)

DEFAULT_STAR_CUTOFF = 3
DEFAULT_REVIEWS_PER_PLACE = 5

KEYWORD_POINTS = 15
EXPRESSION_POINTS = 30
INTENSITY_POINTS = 8
EMOJI_POINTS = 20
SHOUTING_POINTS = 10
EXCLAMATION_POINTS = 15
ELLIPSIS_POINTS = 5
HEALTH_POINTS = 40
DISPUTE_POINTS = 35

NEGATIVE_KEYWORDS = (
    "horrible",
    "atroce",
    "dégueulasse",
    "sale",
    "répugnant",
    "pire",
    "catastroph",
    "scandal",
    "fuyez",
    "évitez",
    "jamais",
    "inadmissible",
    "inacceptable",
    "honteu",
    "dégoûtant",
    "immonde",
    "pourri",
    "nul",
    "minable",
    "lamentable",
    "pitoyable",
    "abject",
    "arnaque",
    "infect",
    "exécrable",
    "awful",
    "terrible",
    "disgusting",
    "worst",
    "rude",
    "dirty",
    "ripoff",
    "rip-off",
)

NEGATIVE_EXPRESSIONS = (
    "je ne recommande pas",
    "je déconseille",
    "à éviter",
    "plus jamais",
    "ne venez pas",
    "n'y allez pas",
    "perte de temps",
    "foutage de gueule",
    "du jamais vu",
    "on s'est fait avoir",
    "service déplorable",
    "never again",
    "do not recommend",
    "stay away",
    "waste of money",
)

INTENSITY_WORDS = (
    "très",
    "extrêmement",
    "complètement",
    "totalement",
    "vraiment",
    "absolument",
    "particulièrement",
    "very",
    "extremely",
    "totally",
    "completely",
    "absolutely",
)

NEGATIVE_EMOJIS = ("😠", "😡", "🤬", "🤮", "🤢", "💩", "👎", "😤", "🙄", "😒", "😞")

HEALTH_KEYWORDS = (
    "intoxication",
    "intoxiqué",
    "empoisonn",
    "malade",
    "maladie",
    "hôpital",
    "hopital",
    "urgences",
    "vomi",
    "food poisoning",
    "hospital",
    "sick",
)

DISPUTE_KEYWORDS = (
    "rembours",
    "plainte",
    "mon avocat",
    "procès",
    "tribunal",
    "litige",
    "police",
    "refund",
    "complaint",
    "lawsuit",
    "lawyer",
)

_KEYWORD_RES = tuple(re.compile(r"(?<!\w)" + re.escape(keyword) + r"\w*") for keyword in NEGATIVE_KEYWORDS)
_INTENSITY_RES = tuple(re.compile(r"(?<!\w)" + re.escape(word) + r"(?!\w)") for word in INTENSITY_WORDS)
_HEALTH_RES = tuple(re.compile(r"(?<!\w)" + re.escape(keyword)) for keyword in HEALTH_KEYWORDS)
_DISPUTE_RES = tuple(re.compile(r"(?<!\w)" + re.escape(keyword)) for keyword in DISPUTE_KEYWORDS)
_SHOUTING_RE = re.compile(r"[A-ZÀ-ÖØ-Þ]{3,}")
_EXCLAMATION_RE = re.compile(r"!{2,}")
_ELLIPSIS_RE = re.compile(r"\.{3,}")

NAME_PLACEHOLDER = "[Nom supprimé]"
PHONE_PLACEHOLDER = "[Téléphone supprimé]"
EMAIL_PLACEHOLDER = "[Email supprimé]"

_HONORIFIC_RE = re.compile(
    r"\b(?:Monsieur|Madame|Mademoiselle|Madam|Mrs\.?|Mr\.?|Ms\.?|Mme\.?|Mlle\.?|Dr\.?|Sir|M\.)(?:\s+[A-ZÀ-Ý][\w'-]*)+"
)
_FULL_NAME_RE = re.compile(r"\b[A-ZÀ-Ý][a-zà-ÿ]+\s+[A-ZÀ-Ý][a-zà-ÿ]+\b")
_PHONE_RE = re.compile(r"(?<![\w+])(?:\+\d|0\d)(?:[\s.\-()]{0,2}\d){7,}")
EMAIL_REGEX = re.compile(r"[A-Z0-9._%+-]+@[A-Z0-9.-]+\.[A-Z]{2,}", re.IGNORECASE)


def _normalize(text: str) -> str:
    return text.lower().replace("’", "'")


def crunchiness_score(text: str, stars: int) -> float:
    """Heuristic measure of how entertainingly negative a review is.

    Pure and additive: the same text and rating always give the same score.
    """
    text = text or ""
    lowered = _normalize(text)

    score = (4 - stars) * 25
    score += min(len(text) / 10, 50)

    for pattern in _KEYWORD_RES:
        score += len(pattern.findall(lowered)) * KEYWORD_POINTS
    for expression in NEGATIVE_EXPRESSIONS:
        if expression in lowered:
            score += EXPRESSION_POINTS
    for pattern in _INTENSITY_RES:
        score += len(pattern.findall(lowered)) * INTENSITY_POINTS
    for emoji in NEGATIVE_EMOJIS:
        if emoji in text:
            score += EMOJI_POINTS

    score += len(_SHOUTING_RE.findall(text)) * SHOUTING_POINTS
    score += len(_EXCLAMATION_RE.findall(text)) * EXCLAMATION_POINTS
    score += len(_ELLIPSIS_RE.findall(text)) * ELLIPSIS_POINTS

    if any(pattern.search(lowered) for pattern in _HEALTH_RES):
        score += HEALTH_POINTS
    if any(pattern.search(lowered) for pattern in _DISPUTE_RES):
        score += DISPUTE_POINTS
    return score


def _redact_phone_numbers(text: str, region: str) -> str:
    matches = list(phonenumbers.PhoneNumberMatcher(text, region))
    for match in reversed(matches):
        text = text[: match.start] + PHONE_PLACEHOLDER + text[match.end :]
    return _PHONE_RE.sub(PHONE_PLACEHOLDER, text)


def anonymize(text: Optional[str], phone_region: str = "FR") -> str:
    """Replace names, phone numbers and email addresses with placeholders."""
    if not text:
        return ""
    anonymized = _HONORIFIC_RE.sub(NAME_PLACEHOLDER, text)
    anonymized = _FULL_NAME_RE.sub(NAME_PLACEHOLDER, anonymized)
    anonymized = _redact_phone_numbers(anonymized, phone_region)
    return EMAIL_REGEX.sub(EMAIL_PLACEHOLDER, anonymized)


def _plural(count: int, singular: str, plural: str) -> str:
    return singular if count == 1 else plural


def format_time_ago(timestamp: Optional[int], now: Optional[float] = None) -> str:
    if not timestamp:
        return "Date inconnue"
    current = time.time() if now is None else now
    diff = current - timestamp

    if diff < 3600:
        return "Il y a moins d'1h"
    if diff < 86400:
        return f"Il y a {int(diff // 3600)}h"
    if diff < 604800:
        days = int(diff // 86400)
        return f"Il y a {days} {_plural(days, 'jour', 'jours')}"
    if diff < 2592000:
        weeks = int(diff // 604800)
        return f"Il y a {weeks} {_plural(weeks, 'semaine', 'semaines')}"
    if diff < 31536000:
        return f"Il y a {int(diff // 2592000)} mois"
    years = int(diff // 31536000)
    return f"Il y a {years} {_plural(years, 'an', 'ans')}"


def select_crunchy_reviews(
    reviews: Iterable[Review],
    *,
    star_cutoff: int = DEFAULT_STAR_CUTOFF,
    limit: int = DEFAULT_REVIEWS_PER_PLACE,
    phone_region: str = "FR",
    now: Optional[float] = None,
) -> List[ScoredReview]:
    """Pick the ``limit`` highest-scoring reviews at or below ``star_cutoff`` stars."""
    scored = [
        (crunchiness_score(review.text, review.stars), review)
        for review in reviews
        if review.stars <= star_cutoff
    ]
    scored.sort(key=lambda item: item[0], reverse=True)
    logger.debug("%d reviews at or below %d stars, keeping %d", len(scored), star_cutoff, min(limit, len(scored)))

    return [
        ScoredReview(
            stars=review.stars,
            text=anonymize(review.text, phone_region),
            time_ago=format_time_ago(review.time, now),
            score=score,
            useful=review.useful,
        )
        for score, review in scored[:limit]
    ]
