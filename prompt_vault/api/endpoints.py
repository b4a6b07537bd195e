from fastapi import APIRouter, Depends, Request
from typing import List, Optional
from prompt_vault.schemas import (
    DeleteResponse,
    PromptPayload,
    PromptResponse,
    TagCountResponse,
)
from prompt_vault.services import PromptStore, QueryEngine

router = APIRouter()


def get_store(request: Request) -> PromptStore:
    return request.app.state.store


def get_query_engine(request: Request) -> QueryEngine:
    return request.app.state.query_engine


@router.get("/health")
def health_check():
    """Health check endpoint."""
    return {"status": "ok"}


@router.get("/prompts", response_model=List[PromptResponse])
def list_prompts(
    search: Optional[str] = None,
    tag: Optional[str] = None,
    favorite: Optional[str] = None,
    query_engine: QueryEngine = Depends(get_query_engine),
):
    """
    List prompts, favorites first and then most recently updated.

    Args:
        search: Case-insensitive substring of title, content or a tag
        tag: Exact tag to filter by
        favorite: Only favorites when set to "true"
    """
    return query_engine.query(term=search, tag=tag, favorite_only=favorite == "true")


@router.get("/prompts/{prompt_id}", response_model=PromptResponse)
def get_prompt(prompt_id: int, store: PromptStore = Depends(get_store)):
    return store.get(prompt_id)


@router.post("/prompts", response_model=PromptResponse, status_code=201)
def create_prompt(payload: PromptPayload, store: PromptStore = Depends(get_store)):
    return store.create(
        title=payload.title,
        content=payload.content,
        tags=payload.tags,
        notes=payload.notes,
        favorite=payload.favorite,
    )


@router.put("/prompts/{prompt_id}", response_model=PromptResponse)
def update_prompt(prompt_id: int, payload: PromptPayload, store: PromptStore = Depends(get_store)):
    return store.update(
        prompt_id,
        title=payload.title,
        content=payload.content,
        tags=payload.tags,
        notes=payload.notes,
        favorite=payload.favorite,
    )


@router.delete("/prompts/{prompt_id}", response_model=DeleteResponse)
def delete_prompt(prompt_id: int, store: PromptStore = Depends(get_store)):
    store.delete(prompt_id)
    return DeleteResponse(success=True)


@router.post("/prompts/{prompt_id}/copy", response_model=PromptResponse)
def record_prompt_usage(prompt_id: int, store: PromptStore = Depends(get_store)):
    """Record that the prompt was copied: bumps useCount and lastUsed."""
    return store.record_usage(prompt_id)


@router.post("/prompts/{prompt_id}/favorite", response_model=PromptResponse)
def toggle_prompt_favorite(prompt_id: int, store: PromptStore = Depends(get_store)):
    return store.toggle_favorite(prompt_id)


@router.get("/tags", response_model=List[TagCountResponse])
def list_tags(store: PromptStore = Depends(get_store)):
    """Tags with the number of prompts using each, most used first."""
    return [TagCountResponse(tag=tag, count=count) for tag, count in store.tag_counts()]
