from fastapi import APIRouter, Depends, Response
from supabase import Client

from ..dependencies import get_current_vendor, get_story_repository, get_vendor_repository, require_vendor
from ..errors import Forbidden, NotFound
from ..repositories import StoryRepository, VendorRepository
from ..schemas.story import StoryCreate, StoryOut
from ..supabase_client import get_supabase_client
from ..utils.logging import log_action

router = APIRouter(prefix="/stories", tags=["stories"])


@router.get("", response_model=list[StoryOut])
def list_stories(
    stories: StoryRepository = Depends(get_story_repository),
    vendors: VendorRepository = Depends(get_vendor_repository),
):
    """Vendor updates feed, newest first, with the posting store attached."""
    feed = stories.list_all()
    by_id = {v["id"]: v for v in vendors.get_many(s["vendor_id"] for s in feed)}
    return [{**story, "vendor": by_id.get(story["vendor_id"])} for story in feed]


@router.post("", response_model=StoryOut, status_code=201)
def create_story(
    payload: StoryCreate,
    user=Depends(require_vendor),
    vendor=Depends(get_current_vendor),
    stories: StoryRepository = Depends(get_story_repository),
    supabase: Client = Depends(get_supabase_client),
):
    story = stories.insert({**payload.model_dump(), "vendor_id": vendor["id"]})
    log_action(supabase, user, "create_story", "story", story["id"])
    return {**story, "vendor": vendor}


@router.delete("/{story_id}", status_code=204)
def delete_story(
    story_id: str,
    user=Depends(require_vendor),
    vendor=Depends(get_current_vendor),
    stories: StoryRepository = Depends(get_story_repository),
    supabase: Client = Depends(get_supabase_client),
):
    story = stories.get(story_id)
    if story is None:
        raise NotFound("Story not found")
    if story["vendor_id"] != vendor["id"]:
        raise Forbidden("You can only delete your own stories")
    stories.delete(story_id)
    log_action(supabase, user, "delete_story", "story", story_id)
    return Response(status_code=204)
