from typing import List

from fastapi import APIRouter, Depends, status

from socialnet.schemas.story import StoryCreate, StoryPublic
from socialnet.services.story_service import StoryService
from socialnet.utils.dependencies import get_current_user, get_story_service
from socialnet.utils.errors import ValidationError, to_http_exception


router = APIRouter(prefix="/stories", tags=["stories"])


@router.post("", response_model=StoryPublic, status_code=status.HTTP_201_CREATED)
async def create_story(body: StoryCreate, current_user: dict = Depends(get_current_user), service: StoryService = Depends(get_story_service)):
    try:
        return await service.create_story(current_user["_id"], body.text)
    except ValidationError as exc:
        raise to_http_exception(exc)


@router.get("", response_model=List[StoryPublic])
async def list_stories(current_user: dict = Depends(get_current_user), service: StoryService = Depends(get_story_service)):
    return await service.list_active()
