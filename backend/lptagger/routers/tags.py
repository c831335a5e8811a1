"""Tag management endpoints."""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select, func, delete
from sqlalchemy.ext.asyncio import AsyncSession

from lptagger.database import get_db
from lptagger.models import Tag, LandingPageTag, CreativeTag
from lptagger.schemas import TagCreate, TagResponse, TagListResponse

router = APIRouter(prefix="/tags", tags=["Tags"])


async def get_tag_or_404(db: AsyncSession, tag_id: int) -> Tag:
    result = await db.execute(select(Tag).where(Tag.id == tag_id))
    tag = result.scalar_one_or_none()
    if not tag:
        raise HTTPException(status_code=404, detail=f"Tag {tag_id} not found")
    return tag


@router.get("", response_model=TagListResponse)
async def list_tags(
    db: AsyncSession = Depends(get_db),
):
    """List all tags, alphabetically."""
    result = await db.execute(select(Tag).order_by(Tag.name, Tag.id))
    tags = result.scalars().all()

    count_result = await db.execute(select(func.count(Tag.id)))
    total = count_result.scalar() or 0

    return TagListResponse(
        items=[TagResponse.model_validate(t) for t in tags],
        total=total,
    )


@router.post("", response_model=TagResponse, status_code=201)
async def create_tag(
    body: TagCreate,
    db: AsyncSession = Depends(get_db),
):
    """Create a tag."""
    tag = Tag(name=body.name, color=body.color.lower())
    db.add(tag)
    await db.flush()
    await db.refresh(tag)

    return TagResponse.model_validate(tag)


@router.delete("/{tag_id}", status_code=204)
async def delete_tag(
    tag_id: int,
    db: AsyncSession = Depends(get_db),
):
    """Delete a tag along with every assignment that uses it."""
    tag = await get_tag_or_404(db, tag_id)

    # Assignments first, then the tag itself
    await db.execute(delete(LandingPageTag).where(LandingPageTag.tag_id == tag_id))
    await db.execute(delete(CreativeTag).where(CreativeTag.tag_id == tag_id))
    await db.delete(tag)
    return None
