from __future__ import annotations

import math
import re
from typing import Any, Dict, List, Optional

TITLE_FIELD = "title_english"

RANK_FIELDS = ("titleExactMatch", "titleWholeWordMatch", "titleLength")

# exact title first, then popularity, then whole-word hits, then shorter titles
SORT_ORDER: Dict[str, int] = {
    "titleExactMatch": -1,
    "likes": -1,
    "titleWholeWordMatch": -1,
    "titleLength": 1,
}


def _regex_flag(pattern: str) -> Dict[str, Any]:
    return {
        "$cond": {
            "if": {
                "$regexMatch": {
                    "input": f"${TITLE_FIELD}",
                    "regex": pattern,
                    "options": "i",
                }
            },
            "then": 1,
            "else": 0,
        }
    }


def ranking_fields(title: Optional[str]) -> Dict[str, Any]:
    """$addFields body computing the ranking annotation for each record"""
    if title:
        escaped = re.escape(title)
        exact = _regex_flag(f"^{escaped}$")
        whole_word = _regex_flag(f"\\b{escaped}\\b")
    else:
        exact = {"$literal": 0}
        whole_word = {"$literal": 0}
    return {
        "titleExactMatch": exact,
        "titleWholeWordMatch": whole_word,
        # code points, not bytes; missing titles count as empty
        "titleLength": {"$strLenCP": {"$ifNull": [f"${TITLE_FIELD}", ""]}},
    }


def ranking_stages(title: Optional[str]) -> List[Dict[str, Any]]:
    return [
        {"$addFields": ranking_fields(title)},
        {"$sort": dict(SORT_ORDER)},
    ]


def _hide_rank_fields() -> Dict[str, Any]:
    return {"$project": {name: 0 for name in RANK_FIELDS}}


def build_search_pipeline(
    match: Dict[str, Any],
    title: Optional[str],
    skip: int,
    limit: int,
) -> List[Dict[str, Any]]:
    """Filter, rank and page the novel collection"""
    return [
        {"$match": match},
        *ranking_stages(title),
        {"$skip": skip},
        {"$limit": limit},
        _hide_rank_fields(),
    ]


def build_lookup_pipeline(name: str) -> List[Dict[str, Any]]:
    """Best single title match for ``name``"""
    return [
        {"$match": {TITLE_FIELD: re.compile(re.escape(name), re.IGNORECASE)}},
        *ranking_stages(name),
        {"$limit": 1},
        _hide_rank_fields(),
    ]


def total_pages(total_count: int, page_size: int) -> int:
    if page_size <= 0:
        return 0
    return math.ceil(total_count / page_size)
