import asyncio
import tempfile
import uuid
from enum import Enum
from pathlib import Path
from typing import Dict, Any, Optional

from botocore.exceptions import BotoCoreError, ClientError
from loguru import logger as custom_logger
from sqlalchemy.exc import SQLAlchemyError
from starlette.datastructures import UploadFile

from app.api.errors import BadRequestError, StorageFailure, UnauthorizedError, UpstreamToolFailure
from app.api.helper.auth import authenticate_request
from app.api.model.video_model import Video
from app.api.repositories.interfaces import IVideoRepository
from app.api.services.processing.interfaces import IContentProbe, IRemuxer
from app.api.services.storage.presigned_url import PresignedURLIssuer, build_video_reference
from app.api.services.upload.s3_uploader import S3Uploader
from app.api.utils.asset_path import build_storage_key
from app.core.config import ACCEPTED_VIDEO_TYPE, COPY_CHUNK_SIZE, MAX_UPLOAD_SIZE, TEMP_DIR


class UploadState(str, Enum):
    RECEIVED = "received"
    VALIDATED = "validated"
    PROBED = "probed"
    REMUXED = "remuxed"
    PUBLISHED = "published"
    PERSISTED = "persisted"
    FAILED = "failed"


def parse_media_type(content_type: Optional[str]) -> str:
    """``video/mp4; codecs=...`` -> ``video/mp4``"""
    if not content_type:
        return ""
    return content_type.split(";", 1)[0].strip().lower()


class UploadSession:
    """Temp files owned by a single upload request.

    The raw upload and the remuxed output are distinct files and both are
    removed on exit, whatever stage the request reached.
    """

    def __init__(self, temp_dir: str = TEMP_DIR):
        self.temp_dir = temp_dir
        self.input_path: Optional[str] = None
        self.output_path: Optional[str] = None

    def create_input(self) -> str:
        with tempfile.NamedTemporaryFile(
            prefix="tubely-upload-", suffix=".mp4", dir=self.temp_dir, delete=False
        ) as f:
            self.input_path = f.name
        return self.input_path

    def adopt_output(self, output_path: str) -> str:
        if output_path == self.input_path:
            raise ValueError("Remux output must not overwrite its input")
        self.output_path = output_path
        return output_path

    def cleanup(self):
        for file_path in (self.input_path, self.output_path):
            if file_path and Path(file_path).exists():
                try:
                    Path(file_path).unlink()
                    custom_logger.debug(f"Cleaned up: {file_path}")
                except OSError as e:
                    custom_logger.warning(f"Cleanup failed {file_path}: {str(e)}")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.cleanup()
        return False


class VideoUploadWorkflowService:
    def __init__(
        self,
        video_repository: IVideoRepository,
        content_probe: IContentProbe,
        remuxer: IRemuxer,
        uploader: S3Uploader,
        url_issuer: PresignedURLIssuer,
        jwt_secret: str,
        max_upload_size: int = MAX_UPLOAD_SIZE,
        accepted_media_type: str = ACCEPTED_VIDEO_TYPE,
        temp_dir: str = TEMP_DIR
    ):
        self.video_repository = video_repository
        self.content_probe = content_probe
        self.remuxer = remuxer
        self.uploader = uploader
        self.url_issuer = url_issuer
        self.jwt_secret = jwt_secret
        self.max_upload_size = max_upload_size
        self.accepted_media_type = accepted_media_type
        self.temp_dir = temp_dir
        self.state: Optional[UploadState] = None

    def _transition(self, state: UploadState):
        custom_logger.debug(f"Upload state: {self.state} -> {state}")
        self.state = state

    async def authorize(self, video_id: str, authorization: Optional[str]) -> Video:
        """Admission: caller must own the video. No file I/O happens here."""
        try:
            parsed_id = uuid.UUID(str(video_id))
        except ValueError:
            raise BadRequestError("Invalid ID")

        user_id = authenticate_request(authorization, self.jwt_secret)

        try:
            video = await self.video_repository.get_video(parsed_id)
        except SQLAlchemyError as e:
            custom_logger.error(f"Video lookup failed for {parsed_id}: {str(e)}", exc_info=True)
            raise StorageFailure("Couldn't find video")

        if video is None:
            custom_logger.warning(f"Video not found: {parsed_id}")
            raise StorageFailure("Couldn't find video")

        if video.user_id != user_id:
            custom_logger.warning(f"User {user_id} is not the owner of video {parsed_id}")
            raise UnauthorizedError("You're not the owner of this video")

        return video

    async def handle_upload(self, video: Video, upload_file: Optional[UploadFile]) -> Dict[str, Any]:
        self._transition(UploadState.RECEIVED)
        try:
            media_type = self._validate_upload(upload_file)
            with UploadSession(self.temp_dir) as upload_session:
                return await self._run_pipeline(video, upload_file, media_type, upload_session)
        except Exception:
            self._transition(UploadState.FAILED)
            raise

    def _validate_upload(self, upload_file: Optional[UploadFile]) -> str:
        if not isinstance(upload_file, UploadFile):
            raise BadRequestError("Couldn't parse form file")

        media_type = parse_media_type(upload_file.content_type)
        if not media_type:
            raise BadRequestError("Invalid Content-Type header")
        if media_type != self.accepted_media_type:
            raise BadRequestError("Invalid media type. Must be a mp4 video")
        return media_type

    async def _run_pipeline(
        self,
        video: Video,
        upload_file: UploadFile,
        media_type: str,
        upload_session: UploadSession
    ) -> Dict[str, Any]:
        custom_logger.info(f"Starting video upload workflow for video {video.id}: {upload_file.filename}")

        input_path = upload_session.create_input()
        received = await self._receive(upload_file, input_path)
        self._transition(UploadState.VALIDATED)
        custom_logger.info(f"Received {received:,} bytes into {input_path}")

        probe_result = await self.content_probe.probe(input_path)
        if not probe_result['success']:
            raise UpstreamToolFailure("Couldn't get video ratio")
        geometry = probe_result['data']
        self._transition(UploadState.PROBED)

        remux_result = await self.remuxer.remux(input_path)
        if not remux_result['success']:
            raise UpstreamToolFailure("Couldn't process video for fast start")
        output_path = upload_session.adopt_output(remux_result['data']['output_path'])
        self._transition(UploadState.REMUXED)

        s3_key = build_storage_key(geometry.prefix, media_type)
        upload_result = await self.uploader.upload_file(output_path, s3_key, media_type)
        if not upload_result['success']:
            raise StorageFailure("Couldn't upload video")
        self._transition(UploadState.PUBLISHED)

        reference = build_video_reference(upload_result['data']['bucket_name'], s3_key)
        try:
            video = await self.video_repository.update_video_url(video, reference)
        except SQLAlchemyError as e:
            # the object stays in the bucket with nothing pointing at it
            custom_logger.error(
                f"Couldn't persist {reference} for video {video.id}, object is orphaned: {str(e)}",
                exc_info=True
            )
            raise StorageFailure("Couldn't update video")
        self._transition(UploadState.PERSISTED)

        try:
            signed_video = self.url_issuer.sign_video(video.to_dict())
        except (BotoCoreError, ClientError):
            raise StorageFailure("Couldn't generate presigned URL")

        custom_logger.info(f"Video {video.id} stored at {reference}")
        return signed_video

    async def _receive(self, upload_file: UploadFile, input_path: str) -> int:
        """Copy the form part to disk, enforcing the size ceiling."""
        loop = asyncio.get_running_loop()
        received = 0
        with open(input_path, 'wb') as f:
            while True:
                chunk = await upload_file.read(COPY_CHUNK_SIZE)
                if not chunk:
                    break
                received += len(chunk)
                if received > self.max_upload_size:
                    max_mb = self.max_upload_size / (1024 * 1024)
                    raise BadRequestError(f"Video too large. Max: {max_mb:.0f}MB")
                await loop.run_in_executor(None, f.write, chunk)
        return received
