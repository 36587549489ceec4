from typing import Optional

from fastapi import APIRouter, Depends, Header, HTTPException, Request
from loguru import logger as custom_logger

from app.api.dependencies import get_video_service, get_video_upload_workflow
from app.api.responses.base import BaseResponse
from app.api.services.video_service import VideoService
from app.api.services.workflow.video_upload_workflow import VideoUploadWorkflowService
from app.core.config import UPLOAD_FORM_FIELD

router = APIRouter()


@router.post("/videos/{video_id}/upload")
async def upload_video_api(
    video_id: str,
    request: Request,
    authorization: Optional[str] = Header(None),
    workflow: VideoUploadWorkflowService = Depends(get_video_upload_workflow)
):
    """Upload an MP4 for a video the caller owns."""
    # ownership is settled before the multipart body is touched
    video = await workflow.authorize(video_id, authorization)

    async with request.form(max_files=1, max_fields=10) as form:
        signed_video = await workflow.handle_upload(video, form.get(UPLOAD_FORM_FIELD))

    custom_logger.info(f"Video upload completed: {video_id}")
    return BaseResponse.success_response(
        message="Video uploaded successfully",
        data=signed_video
    )


@router.get("/videos/{video_id}")
async def get_video_api(
    video_id: str,
    video_service: VideoService = Depends(get_video_service)
):
    video = await video_service.get_video(video_id)

    if not video:
        raise HTTPException(404, "Video not found")

    return BaseResponse.success_response(
        message="Video retrieved successfully",
        data=video
    )


@router.get("/videos")
async def list_videos_api(
    authorization: Optional[str] = Header(None),
    video_service: VideoService = Depends(get_video_service)
):
    videos = await video_service.list_videos(authorization)
    return BaseResponse.success_response(
        message="Videos retrieved successfully",
        data=videos
    )
