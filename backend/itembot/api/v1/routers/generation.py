# itembot/api/v1/routers/generation.py
import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import StreamingResponse

from itembot.api.v1.deps import get_backend_dep, get_current_user, get_store_dep
from itembot.core.db import Store
from itembot.models import User
from itembot.schemas.generation import ChatIn, ImageEditIn, ImageIn, ImageOut, NewsOut, StoryIn
from itembot.services.ai_base import GenerationBackend, GenerationError, ImagePayload
from itembot.services.generation import GenerationService, QuotaExceededError
from itembot.services.news_cache import get_algorithm_news

logger = logging.getLogger("uvicorn.error")

router = APIRouter(tags=["generation"])


def get_generation_service(
    store: Store = Depends(get_store_dep),
    backend: GenerationBackend = Depends(get_backend_dep),
) -> GenerationService:
    return GenerationService(store, backend)


def _quota_error(e: QuotaExceededError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                         detail={"code": "QUOTA_EXCEEDED", "message": str(e)})


def _backend_error(e: GenerationError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_502_BAD_GATEWAY,
                         detail={"code": "GENERATION_FAILED", "message": str(e)})


@router.post("/generate/story")
async def generate_story(
    body: StoryIn,
    user: User = Depends(get_current_user),
    service: GenerationService = Depends(get_generation_service),
):
    """
    Stream a story scenario as plain text.

    The quota is checked before streaming starts (429 if exhausted). Once the
    stream completes the story is saved to the user's story history. A
    failure mid-stream is reported as a final text line because the status
    code has already been sent.
    """
    try:
        chunks = service.stream_story_scenario(user.user_id, body.idea)
    except QuotaExceededError as e:
        raise _quota_error(e)

    async def body_iter():
        try:
            async for chunk in chunks:
                yield chunk
        except GenerationError as e:
            logger.error("[generate] story stream failed: %s", e)
            yield f"\n\nError while generating the story scenario: {e}"

    return StreamingResponse(body_iter(), media_type="text/plain; charset=utf-8")


@router.post("/generate/captions/{scenario_id}")
async def generate_caption(
    scenario_id: int,
    user: User = Depends(get_current_user),
    service: GenerationService = Depends(get_generation_service),
):
    """
    Mark a scenario as recorded and generate its caption.

    The scenario is consumed even if generation fails.
    """
    try:
        caption = await service.generate_caption_for_scenario(user.user_id, scenario_id)
    except GenerationError as e:
        raise _backend_error(e)
    if caption is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="NOT_FOUND")
    return {"success": True, "data": caption.model_dump(mode="json")}


@router.post("/generate/chat")
async def chat(
    body: ChatIn,
    user: User = Depends(get_current_user),
    service: GenerationService = Depends(get_generation_service),
):
    try:
        reply = await service.send_chat_message(user.user_id, body.message)
    except QuotaExceededError as e:
        raise _quota_error(e)
    except GenerationError as e:
        raise _backend_error(e)
    return {"success": True, "data": {"reply": reply}}


@router.post("/generate/image")
async def generate_image(
    body: ImageIn,
    user: User = Depends(get_current_user),
    service: GenerationService = Depends(get_generation_service),
):
    try:
        image = await service.generate_image(user.user_id, body.prompt)
    except QuotaExceededError as e:
        raise _quota_error(e)
    except GenerationError as e:
        raise _backend_error(e)
    return {"success": True, "data": ImageOut(url=image.data_url, mimeType=image.mime_type).model_dump()}


@router.post("/generate/image/edit")
async def edit_image(
    body: ImageEditIn,
    user: User = Depends(get_current_user),
    service: GenerationService = Depends(get_generation_service),
):
    source = ImagePayload(data=body.imageData, mime_type=body.mimeType)
    try:
        image = await service.edit_image(user.user_id, body.prompt, source)
    except QuotaExceededError as e:
        raise _quota_error(e)
    except GenerationError as e:
        raise _backend_error(e)
    return {"success": True, "data": ImageOut(url=image.data_url, mimeType=image.mime_type).model_dump()}


@router.get("/news")
async def algorithm_news(
    refresh: bool = Query(False, description="Bypass today's cached article"),
    user: User = Depends(get_current_user),
    store: Store = Depends(get_store_dep),
    backend: GenerationBackend = Depends(get_backend_dep),
):
    """Today's Instagram algorithm news, fetched at most once per day unless refreshed."""
    try:
        entry = await get_algorithm_news(store, backend, force_refresh=refresh)
    except GenerationError as e:
        raise _backend_error(e)
    return {"success": True, "data": NewsOut(**entry).model_dump()}
