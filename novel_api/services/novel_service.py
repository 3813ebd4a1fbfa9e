"""
Novel catalog service
"""

import logging
from typing import Any, Dict, List, Mapping, Optional

from bson import ObjectId
from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from novel_api.core.config import settings
from novel_api.core.exceptions import NotFound, StoreUnavailable
from novel_api.services.query_builder import ParamValue, build_filter, parse_paging
from novel_api.services.ranking_service import (
    TITLE_FIELD,
    build_lookup_pipeline,
    build_search_pipeline,
    total_pages,
)

logger = logging.getLogger(__name__)


def serialize_document(doc: Dict[str, Any]) -> Dict[str, Any]:
    """Make a stored document JSON friendly"""
    out = dict(doc)
    if isinstance(out.get("_id"), ObjectId):
        out["_id"] = str(out["_id"])
    return out


def _title_query(params: Mapping[str, ParamValue]) -> Optional[str]:
    value = params.get(TITLE_FIELD)
    return value if isinstance(value, str) and value else None


def search_novels(collection: Collection, params: Mapping[str, ParamValue]) -> Dict[str, Any]:
    """Filtered, ranked and paginated novel search"""
    paging = parse_paging(
        params,
        default_page_size=settings.DEFAULT_PAGE_SIZE,
        max_page_size=settings.MAX_PAGE_SIZE,
    )
    match = build_filter(
        params,
        filterable_fields=settings.FILTERABLE_FIELDS,
        exclude_combinator=settings.TAGS_EXCLUDE_COMBINATOR,
    )
    pipeline = build_search_pipeline(match, _title_query(params), paging.skip, paging.page_size)

    try:
        results = [serialize_document(d) for d in collection.aggregate(pipeline)]
        total_count = collection.count_documents(match)
    except PyMongoError as e:
        logger.error(f"Novel search failed: {e}")
        raise StoreUnavailable("Internal Server Error") from e

    return {
        "results": results,
        "totalCount": total_count,
        "currentPage": paging.page,
        "totalPages": total_pages(total_count, paging.page_size),
    }


def get_novel_by_name(collection: Collection, name: str) -> List[Dict[str, Any]]:
    """Best match for a title; empty list when nothing matches"""
    try:
        return [serialize_document(d) for d in collection.aggregate(build_lookup_pipeline(name))]
    except PyMongoError as e:
        logger.error(f"Novel lookup for {name!r} failed: {e}")
        raise StoreUnavailable("Failed to retrieve novels") from e


def get_random_novel(collection: Collection) -> Dict[str, Any]:
    """One uniformly sampled novel"""
    try:
        sample = list(collection.aggregate([{"$sample": {"size": 1}}]))
    except PyMongoError as e:
        logger.error(f"Random novel sampling failed: {e}")
        raise StoreUnavailable("Internal Server Error") from e
    if not sample:
        raise NotFound("No novels found")
    return serialize_document(sample[0])
