"""Tag assignment endpoints for creatives."""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy import select, delete
from sqlalchemy.ext.asyncio import AsyncSession

from lptagger.database import get_db
from lptagger.models import Tag, CreativeTag
from lptagger.schemas import TagAssign, TagResponse
from lptagger.routers.tags import get_tag_or_404

router = APIRouter(prefix="/creatives", tags=["Creatives"])


@router.get("/{creative_id}/tags", response_model=List[TagResponse])
async def get_creative_tags(
    creative_id: int,
    db: AsyncSession = Depends(get_db),
):
    """Tags assigned to a creative."""
    result = await db.execute(
        select(Tag)
        .join(CreativeTag, CreativeTag.tag_id == Tag.id)
        .where(CreativeTag.creative_id == creative_id)
        .order_by(Tag.name, Tag.id)
    )
    return [TagResponse.model_validate(t) for t in result.scalars().all()]


@router.post("/{creative_id}/tags", response_model=TagResponse, status_code=201)
async def add_creative_tag(
    creative_id: int,
    body: TagAssign,
    db: AsyncSession = Depends(get_db),
):
    """Assign a tag to a creative. Assigning it twice is a no-op."""
    tag = await get_tag_or_404(db, body.tag_id)

    existing = await db.execute(
        select(CreativeTag).where(
            CreativeTag.creative_id == creative_id,
            CreativeTag.tag_id == tag.id,
        )
    )
    if existing.scalar_one_or_none() is None:
        db.add(CreativeTag(creative_id=creative_id, tag_id=tag.id))
        await db.flush()

    return TagResponse.model_validate(tag)


@router.delete("/{creative_id}/tags/{tag_id}", status_code=204)
async def remove_creative_tag(
    creative_id: int,
    tag_id: int,
    db: AsyncSession = Depends(get_db),
):
    """Remove one tag from a creative."""
    await db.execute(
        delete(CreativeTag).where(
            CreativeTag.creative_id == creative_id,
            CreativeTag.tag_id == tag_id,
        )
    )
    return None
