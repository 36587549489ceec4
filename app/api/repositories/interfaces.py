from abc import ABC, abstractmethod
from typing import List, Optional, Any
import uuid


class IVideoRepository(ABC):
    @abstractmethod
    async def get_video(self, video_id: uuid.UUID) -> Optional[Any]:
        pass

    @abstractmethod
    async def update_video_url(self, video: Any, video_url: str) -> Any:
        pass

    @abstractmethod
    async def list_videos_for_user(self, user_id: uuid.UUID) -> List[Any]:
        pass
