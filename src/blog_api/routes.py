# Blog endpoints
from typing import Any

from fastapi import APIRouter, Body, Depends
from fastapi.responses import JSONResponse

from blog_api.auth import get_current_user
from blog_api.services import BlogService, OperationResult, get_blog_service

router = APIRouter(prefix="/blog", tags=["Blogs"], dependencies=[Depends(get_current_user)])


def to_response(result: OperationResult) -> JSONResponse:
    return JSONResponse(status_code=result.status_code, content=result.body)


@router.post("", status_code=201, summary="Create a blog with its photo")
async def create_blog(payload: Any = Body(None), service: BlogService = Depends(get_blog_service)):
    return to_response(await service.create(payload))


# Declared before /{blog_id} so "all" is not taken for an id
@router.get("/all", summary="List all blogs")
async def get_all_blogs(service: BlogService = Depends(get_blog_service)):
    return to_response(await service.get_all())


@router.get("/{blog_id}", summary="Get a blog with its author")
async def get_blog(blog_id: str, service: BlogService = Depends(get_blog_service)):
    return to_response(await service.get_by_id(blog_id))


@router.put("", summary="Update a blog, optionally replacing its photo")
async def update_blog(payload: Any = Body(None), service: BlogService = Depends(get_blog_service)):
    return to_response(await service.update(payload))


@router.delete("/{blog_id}", summary="Delete a blog and its comments")
async def delete_blog(blog_id: str, service: BlogService = Depends(get_blog_service)):
    return to_response(await service.delete(blog_id))
