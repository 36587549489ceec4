import uuid
from typing import Dict, Any, List, Optional

from botocore.exceptions import BotoCoreError, ClientError
from loguru import logger as custom_logger
from sqlalchemy.exc import SQLAlchemyError

from app.api.errors import BadRequestError, StorageFailure
from app.api.helper.auth import authenticate_request
from app.api.repositories.interfaces import IVideoRepository
from app.api.services.storage.presigned_url import PresignedURLIssuer


class VideoService:
    """Read side: every video leaves here with a freshly presigned URL."""

    def __init__(self, video_repository: IVideoRepository, url_issuer: PresignedURLIssuer, jwt_secret: str):
        self.video_repository = video_repository
        self.url_issuer = url_issuer
        self.jwt_secret = jwt_secret

    async def get_video(self, video_id: str) -> Optional[Dict[str, Any]]:
        try:
            parsed_id = uuid.UUID(str(video_id))
        except ValueError:
            raise BadRequestError("Invalid ID")

        try:
            video = await self.video_repository.get_video(parsed_id)
        except SQLAlchemyError as e:
            custom_logger.error(f"Video lookup failed for {parsed_id}: {str(e)}", exc_info=True)
            raise StorageFailure("Couldn't get video")

        if video is None:
            return None
        return self._sign(video.to_dict())

    async def list_videos(self, authorization: Optional[str]) -> List[Dict[str, Any]]:
        user_id = authenticate_request(authorization, self.jwt_secret)

        try:
            videos = await self.video_repository.list_videos_for_user(user_id)
        except SQLAlchemyError as e:
            custom_logger.error(f"Video listing failed for user {user_id}: {str(e)}", exc_info=True)
            raise StorageFailure("Couldn't retrieve videos")

        return [self._sign(video.to_dict()) for video in videos]

    def _sign(self, video: Dict[str, Any]) -> Dict[str, Any]:
        try:
            return self.url_issuer.sign_video(video)
        except (BotoCoreError, ClientError):
            raise StorageFailure("Couldn't generate presigned URL")
