"""
Shared fixtures for the video upload service tests.

Environment is seeded before anything under ``app`` is imported, since the
config module reads it at import time.
"""
import os

os.environ.setdefault("JWT_SECRET", "test-jwt-secret-with-enough-entropy-0123456789")
os.environ.setdefault("AWS_ACCESS_KEY", "test-access-key")
os.environ.setdefault("AWS_SECRET_KEY", "test-secret-key")
os.environ.setdefault("AWS_REGION", "us-east-2")
os.environ.setdefault("S3_BUCKET", "test-bucket")

import uuid
from pathlib import Path

import pytest

from app.api.helper.auth import make_jwt
from app.api.model.video_model import Video
from app.api.services.storage.presigned_url import PresignedURLIssuer
from app.api.services.workflow.video_upload_workflow import VideoUploadWorkflowService
from tests.fakes import (
    JWT_SECRET,
    FakeContentProbe,
    FakeRemuxer,
    FakeUploader,
    FakeVideoRepository,
    make_upload_file,
)


@pytest.fixture
def owner_id() -> uuid.UUID:
    return uuid.uuid4()


@pytest.fixture
def video(owner_id) -> Video:
    return Video(id=uuid.uuid4(), user_id=owner_id, title="Boot.dev launch", description="demo")


@pytest.fixture
def owner_token(owner_id) -> str:
    return make_jwt(owner_id, JWT_SECRET)


@pytest.fixture
def stranger_token() -> str:
    return make_jwt(uuid.uuid4(), JWT_SECRET)


@pytest.fixture
def video_repository(video) -> FakeVideoRepository:
    return FakeVideoRepository([video])


@pytest.fixture
def content_probe() -> FakeContentProbe:
    return FakeContentProbe()


@pytest.fixture
def remuxer() -> FakeRemuxer:
    return FakeRemuxer()


@pytest.fixture
def uploader() -> FakeUploader:
    return FakeUploader()


@pytest.fixture
def upload_dir(tmp_path) -> Path:
    path = tmp_path / "uploads"
    path.mkdir()
    return path


@pytest.fixture
def workflow(video_repository, content_probe, remuxer, uploader, upload_dir) -> VideoUploadWorkflowService:
    return VideoUploadWorkflowService(
        video_repository=video_repository,
        content_probe=content_probe,
        remuxer=remuxer,
        uploader=uploader,
        url_issuer=PresignedURLIssuer(),
        jwt_secret=JWT_SECRET,
        temp_dir=str(upload_dir)
    )


@pytest.fixture
def make_upload():
    return make_upload_file
