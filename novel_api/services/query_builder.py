"""
Search filter construction

Turns the raw query parameters of a search request into a MongoDB filter
document. Every rule appends at most one clause to a top level ``$and``:

    likes         -> likes >= floor(likes)
    rating        -> rating >= rating
    tags          -> every tag present (exact, case-insensitive)
    nsfw != true  -> no "Adult" tag
    tags_exclude  -> per-tag "does not have tag", joined with $or (or $and)
    anything else -> case-insensitive substring match on that field

When nothing applies the filter still carries ``likes >= 0`` so the clause
list is never empty.
"""

from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Literal, Mapping, Optional, Sequence, Union

logger = logging.getLogger(__name__)

ParamValue = Union[str, Sequence[str]]
ExcludeCombinator = Literal["or", "and"]

RESERVED_PARAMS = frozenset({"likes", "rating", "tags", "tags_exclude", "nsfw", "page", "pageSize"})
ADULT_TAG = "Adult"

# BSON integers are signed 64-bit
INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1


@dataclass(frozen=True)
class Paging:
    page: int
    page_size: int

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.page_size


def as_list(value: Optional[ParamValue]) -> List[str]:
    """Normalize a single value or a repeated query parameter to a list"""
    if value is None:
        return []
    if isinstance(value, str):
        return [value] if value else []
    return [str(v) for v in value if v]


def _single(value: Optional[ParamValue]) -> Optional[str]:
    if isinstance(value, str):
        return value
    return None


def _first(value: Optional[ParamValue]) -> Optional[str]:
    values = as_list(value)
    return values[0] if values else None


def _parse_number(name: str, raw: Optional[str]) -> Optional[float]:
    if not raw:
        return None
    try:
        number = float(raw)
    except ValueError:
        logger.warning(f"Ignoring non-numeric '{name}' filter: {raw!r}")
        return None
    if not math.isfinite(number):
        logger.warning(f"Ignoring non-finite '{name}' filter: {raw!r}")
        return None
    return number


def exact_tag_pattern(tag: str) -> re.Pattern:
    return re.compile(f"^{re.escape(tag)}$", re.IGNORECASE)


def substring_pattern(text: str) -> re.Pattern:
    return re.compile(re.escape(text), re.IGNORECASE)


def wants_adult_content(params: Mapping[str, ParamValue]) -> bool:
    flag = _first(params.get("nsfw"))
    return flag is not None and flag.strip().lower() == "true"


def _is_safe_field(name: str) -> bool:
    # "$where", "$expr" and friends must never become filter keys
    return bool(name) and not name.startswith("$") and "\x00" not in name


def build_filter(
    params: Mapping[str, ParamValue],
    *,
    filterable_fields: Optional[Iterable[str]] = None,
    exclude_combinator: ExcludeCombinator = "or",
) -> Dict[str, Any]:
    """Build the search filter for a set of query parameters.

    ``filterable_fields`` restricts which non-reserved parameters become
    substring filters; ``None`` or empty accepts any safe field name.
    ``exclude_combinator`` decides how the per-tag exclusion conditions are
    joined. With "or" a record passes as long as it avoids at least one of the
    excluded tags; with "and" it must avoid all of them.
    """
    allowed = set(filterable_fields or ())
    clauses: List[Dict[str, Any]] = []

    likes = _parse_number("likes", _first(params.get("likes")))
    if likes is not None:
        threshold = math.floor(likes)
        if INT64_MIN <= threshold <= INT64_MAX:
            clauses.append({"likes": {"$gte": threshold}})
        else:
            logger.warning(f"Ignoring out-of-range 'likes' filter: {likes!r}")

    rating = _parse_number("rating", _first(params.get("rating")))
    if rating is not None:
        clauses.append({"rating": {"$gte": rating}})

    tags = as_list(params.get("tags"))
    if tags:
        clauses.append({"$and": [{"tags": exact_tag_pattern(tag)} for tag in tags]})

    if not wants_adult_content(params):
        clauses.append({"tags": {"$not": exact_tag_pattern(ADULT_TAG)}})

    excluded = as_list(params.get("tags_exclude"))
    if excluded:
        operator = "$and" if exclude_combinator == "and" else "$or"
        clauses.append({operator: [{"tags": {"$not": exact_tag_pattern(tag)}} for tag in excluded]})

    for name, value in params.items():
        if name in RESERVED_PARAMS:
            continue
        text = _single(value)
        if text is None:
            continue
        if not _is_safe_field(name):
            logger.warning(f"Ignoring unsafe filter field {name!r}")
            continue
        if allowed and name not in allowed:
            logger.warning(f"Ignoring filter on non-filterable field {name!r}")
            continue
        clauses.append({name: substring_pattern(text)})

    if not clauses:
        clauses.append({"likes": {"$gte": 0}})

    return {"$and": clauses}


def _parse_int(raw: Optional[str]) -> Optional[int]:
    if not raw:
        return None
    try:
        return int(float(raw))
    except (ValueError, OverflowError):
        return None


def parse_paging(
    params: Mapping[str, ParamValue],
    *,
    default_page_size: int = 100,
    max_page_size: int = 100,
) -> Paging:
    """Read ``page`` and ``pageSize``; bad values fall back to the defaults"""
    page = _parse_int(_first(params.get("page")))
    if page is None or page < 1:
        page = 1

    page_size = _parse_int(_first(params.get("pageSize")))
    if page_size is None:
        page_size = default_page_size
    page_size = max(1, min(page_size, max_page_size, INT64_MAX))

    # $skip must stay a 64-bit integer
    page = min(page, INT64_MAX // page_size + 1)

    return Paging(page=page, page_size=page_size)
