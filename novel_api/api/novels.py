"""
Novel catalog API router
"""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import FileResponse
from pymongo.collection import Collection
from pymongo.database import Database
from typing import Any, Dict, List, Union

from novel_api.core.database import get_db, novels_collection
from novel_api.schemas import (
    ChapterContentResponse,
    ChapterListResponse,
    FolderListResponse,
    NovelSearchResponse,
)
from novel_api.services import chapter_service, novel_service

# Handlers are plain def: pymongo is blocking, so FastAPI runs them in its threadpool
router = APIRouter()


def get_novel_collection(db: Database = Depends(get_db)) -> Collection:
    return novels_collection(db)


def query_params_dict(request: Request) -> Dict[str, Union[str, List[str]]]:
    """Query string as a dict; repeated parameters become lists"""
    params: Dict[str, Union[str, List[str]]] = {}
    for key in request.query_params.keys():
        values = request.query_params.getlist(key)
        params[key] = values[0] if len(values) == 1 else values
    return params


# Fixed paths are declared before the /{novel_name} catch-alls below.
@router.get("/novels", response_model=NovelSearchResponse)
def list_novels(
    request: Request,
    collection: Collection = Depends(get_novel_collection),
):
    """Ranked, paginated novel listing"""
    return novel_service.search_novels(collection, query_params_dict(request))


@router.get("/novels/folders", response_model=FolderListResponse)
def list_novel_folders():
    """Novel directories present in the file tree"""
    return {"folders": chapter_service.list_novel_folders()}


@router.get("/query", response_model=NovelSearchResponse)
def query_novels(
    request: Request,
    collection: Collection = Depends(get_novel_collection),
):
    """Search novels with tag, threshold and free-text filters"""
    return novel_service.search_novels(collection, query_params_dict(request))


@router.get("/random")
def random_novel(collection: Collection = Depends(get_novel_collection)) -> Dict[str, Any]:
    """One random novel"""
    return novel_service.get_random_novel(collection)


@router.get("/{novel_name}")
def get_novel(
    novel_name: str,
    collection: Collection = Depends(get_novel_collection),
) -> List[Dict[str, Any]]:
    """Best title match for a novel name"""
    return novel_service.get_novel_by_name(collection, novel_name)


@router.get("/{novel_name}/cover", response_class=FileResponse)
def get_cover(novel_name: str):
    """Cover image"""
    return FileResponse(chapter_service.get_cover_path(novel_name), media_type="image/png")


@router.get("/{novel_name}/chapterlist", response_model=ChapterListResponse)
def get_chapter_list(novel_name: str):
    """Chapter names in numeric order"""
    return {"chapters": chapter_service.list_chapters(novel_name)}


@router.get("/{novel_name}/{chapter_number}", response_model=ChapterContentResponse)
def read_chapter(novel_name: str, chapter_number: str):
    """Markdown content of a chapter"""
    return {"content": chapter_service.get_chapter(novel_name, chapter_number)}
