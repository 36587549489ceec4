from typing import List, Optional
import uuid
from datetime import datetime, timezone
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.model.video_model import Video
from app.api.repositories.interfaces import IVideoRepository

class VideoRepository(IVideoRepository):
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_video(self, video_id: uuid.UUID) -> Optional[Video]:
        try:
            video = await self.session.get(Video, video_id)
            # end the read transaction so the connection goes back to the pool
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise
        return video

    async def update_video_url(self, video: Video, video_url: str) -> Video:
        video.video_url = video_url
        video.updated_at = datetime.now(timezone.utc)
        try:
            await self.session.commit()
        except Exception:
            await self.session.rollback()
            raise
        await self.session.refresh(video)
        return video

    async def list_videos_for_user(self, user_id: uuid.UUID) -> List[Video]:
        result = await self.session.execute(
            select(Video)
            .where(Video.user_id == user_id)
            .order_by(Video.created_at.desc())
        )
        return list(result.scalars().all())
