"""Feed endpoints. Registered before the UI router so ``/uis/home`` wins over ``/uis/{ui_id}``."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ..core.config import settings
from ..database import get_db
from ..schemas.ui import FeedMode, TimeRange, UiListResponse, UserFeedMode
from ..services import FeedService

router = APIRouter(prefix="/api/website-editor", tags=["feeds"])


@router.get("/uis", response_model=UiListResponse)
def list_uis(
    mode: FeedMode = Query(FeedMode.LATEST),
    start: int = Query(0, ge=0),
    limit: int = Query(settings.feed_default_limit, ge=1, le=settings.feed_max_limit),
    time_range: TimeRange = Query(TimeRange.ALL),
    db: Session = Depends(get_db),
):
    """Global feed: latest, most liked or most viewed."""
    return UiListResponse(uis=FeedService(db).list_uis(mode, start, limit, time_range))


@router.get("/uis/home", response_model=UiListResponse)
def home_feed(db: Session = Depends(get_db)):
    """Most recently updated UIs."""
    return UiListResponse(uis=FeedService(db).get_home_feed())


@router.get("/users/{user_id}/uis", response_model=UiListResponse)
def user_feed(
    user_id: str,
    mode: UserFeedMode = Query(UserFeedMode.OWN),
    start: int = Query(0, ge=0),
    limit: int = Query(settings.feed_default_limit, ge=1, le=settings.feed_max_limit),
    db: Session = Depends(get_db),
):
    """A user's own UIs or the UIs they liked."""
    return UiListResponse(uis=FeedService(db).get_user_feed(user_id, start, limit, mode))
