from fastapi import Depends
from app.api.services.processing.content_probe import ContentProbe
from app.api.services.processing.remuxer import Remuxer
from app.api.services.storage.presigned_url import PresignedURLIssuer
from app.api.services.upload.s3_uploader import S3Uploader
from app.api.services.video_service import VideoService
from app.api.services.workflow.video_upload_workflow import VideoUploadWorkflowService
from app.api.repositories.video_repository import VideoRepository
from app.api.db.session import AsyncSessionLocal
from app.core.config import JWT_SECRET

# --- Low Level Services ---

def get_content_probe():
    return ContentProbe()

def get_remuxer():
    return Remuxer()

def get_video_uploader():
    return S3Uploader()

def get_url_issuer():
    return PresignedURLIssuer()

def get_jwt_secret() -> str:
    return str(JWT_SECRET)

# --- Repositories ---

def get_db_session():
    return AsyncSessionLocal()

async def get_video_repository(session = Depends(get_db_session)):
    try:
        yield VideoRepository(session)
    finally:
        await session.close()


# --- Workflow Services ---

def get_video_upload_workflow(
    video_repository: VideoRepository = Depends(get_video_repository),
    content_probe: ContentProbe = Depends(get_content_probe),
    remuxer: Remuxer = Depends(get_remuxer),
    uploader: S3Uploader = Depends(get_video_uploader),
    url_issuer: PresignedURLIssuer = Depends(get_url_issuer),
    jwt_secret: str = Depends(get_jwt_secret)
) -> VideoUploadWorkflowService:
    return VideoUploadWorkflowService(
        video_repository=video_repository,
        content_probe=content_probe,
        remuxer=remuxer,
        uploader=uploader,
        url_issuer=url_issuer,
        jwt_secret=jwt_secret
    )

def get_video_service(
    video_repository: VideoRepository = Depends(get_video_repository),
    url_issuer: PresignedURLIssuer = Depends(get_url_issuer),
    jwt_secret: str = Depends(get_jwt_secret)
) -> VideoService:
    return VideoService(
        video_repository=video_repository,
        url_issuer=url_issuer,
        jwt_secret=jwt_secret
    )
