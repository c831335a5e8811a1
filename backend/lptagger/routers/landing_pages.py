"""Tag assignment endpoints for landing pages."""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy import select, delete
from sqlalchemy.ext.asyncio import AsyncSession

from lptagger.database import get_db
from lptagger.models import Tag, LandingPageTag
from lptagger.schemas import TagAssign, TagResponse
from lptagger.routers.tags import get_tag_or_404

router = APIRouter(prefix="/landing-pages", tags=["Landing Pages"])


@router.get("/{landing_page_id}/tags", response_model=List[TagResponse])
async def get_landing_page_tags(
    landing_page_id: int,
    db: AsyncSession = Depends(get_db),
):
    """Tags assigned to a landing page."""
    result = await db.execute(
        select(Tag)
        .join(LandingPageTag, LandingPageTag.tag_id == Tag.id)
        .where(LandingPageTag.landing_page_id == landing_page_id)
        .order_by(Tag.name, Tag.id)
    )
    return [TagResponse.model_validate(t) for t in result.scalars().all()]


@router.post("/{landing_page_id}/tags", response_model=TagResponse, status_code=201)
async def add_landing_page_tag(
    landing_page_id: int,
    body: TagAssign,
    db: AsyncSession = Depends(get_db),
):
    """Assign a tag to a landing page. Assigning it twice is a no-op."""
    tag = await get_tag_or_404(db, body.tag_id)

    existing = await db.execute(
        select(LandingPageTag).where(
            LandingPageTag.landing_page_id == landing_page_id,
            LandingPageTag.tag_id == tag.id,
        )
    )
    if existing.scalar_one_or_none() is None:
        db.add(LandingPageTag(landing_page_id=landing_page_id, tag_id=tag.id))
        await db.flush()

    return TagResponse.model_validate(tag)


@router.delete("/{landing_page_id}/tags/{tag_id}", status_code=204)
async def remove_landing_page_tag(
    landing_page_id: int,
    tag_id: int,
    db: AsyncSession = Depends(get_db),
):
    """Remove one tag from a landing page."""
    await db.execute(
        delete(LandingPageTag).where(
            LandingPageTag.landing_page_id == landing_page_id,
            LandingPageTag.tag_id == tag_id,
        )
    )
    return None
