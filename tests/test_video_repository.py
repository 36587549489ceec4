import uuid
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy import text
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from app.api.model.video_model import Video
from app.api.repositories.video_repository import VideoRepository


@pytest.fixture
def session():
    session = MagicMock()
    session.get = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.refresh = AsyncMock()
    session.execute = AsyncMock()
    return session


async def test_get_video_by_primary_key(session):
    video_id = uuid.uuid4()
    session.get.return_value = "row"

    assert await VideoRepository(session).get_video(video_id) == "row"
    session.get.assert_awaited_once_with(Video, video_id)


async def test_get_video_does_not_hold_a_transaction(session):
    calls = []
    session.get.side_effect = lambda *args: calls.append("get") or "row"
    session.commit.side_effect = lambda: calls.append("commit")

    await VideoRepository(session).get_video(uuid.uuid4())

    # the row is read, then the transaction is closed before the caller moves on
    assert calls == ["get", "commit"]
    session.rollback.assert_not_awaited()


async def test_get_video_rolls_back_when_lookup_fails(session):
    session.get.side_effect = OperationalError("SELECT videos", {}, Exception("gone"))

    with pytest.raises(OperationalError):
        await VideoRepository(session).get_video(uuid.uuid4())

    session.rollback.assert_awaited_once()
    session.commit.assert_not_awaited()


async def test_update_video_url_commits(session):
    video = Video(id=uuid.uuid4(), user_id=uuid.uuid4(), title="t")

    updated = await VideoRepository(session).update_video_url(video, "bucket,landscape/abc.mp4")

    assert updated is video
    assert video.video_url == "bucket,landscape/abc.mp4"
    assert video.updated_at is not None
    session.commit.assert_awaited_once()
    session.refresh.assert_awaited_once_with(video)


async def test_update_video_url_rolls_back_on_failure(session):
    session.commit.side_effect = OperationalError("UPDATE videos", {}, Exception("gone"))
    video = Video(id=uuid.uuid4(), user_id=uuid.uuid4(), title="t")

    with pytest.raises(OperationalError):
        await VideoRepository(session).update_video_url(video, "bucket,key")

    session.rollback.assert_awaited_once()
    session.refresh.assert_not_awaited()


def test_to_dict_keeps_reference_form():
    video_id, user_id = uuid.uuid4(), uuid.uuid4()
    video = Video(id=video_id, user_id=user_id, title="t", video_url="bucket,other/abc.mp4")

    data = video.to_dict()

    assert data["id"] == str(video_id)
    assert data["user_id"] == str(user_id)
    assert data["video_url"] == "bucket,other/abc.mp4"
    assert data["created_at"] is None


# =============================================================================
# Real session
# =============================================================================

VIDEOS_DDL = """
CREATE TABLE videos (
    id CHAR(32) PRIMARY KEY,
    user_id CHAR(32) NOT NULL,
    title VARCHAR(255) NOT NULL,
    description TEXT,
    thumbnail_url TEXT,
    video_url TEXT,
    created_at DATETIME NOT NULL DEFAULT CURRENT_TIMESTAMP,
    updated_at DATETIME NOT NULL DEFAULT CURRENT_TIMESTAMP
)
"""


@pytest.fixture
async def sqlite_engine(tmp_path):
    pytest.importorskip("aiosqlite")
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'videos.db'}")
    async with engine.begin() as conn:
        await conn.execute(text(VIDEOS_DDL))
    yield engine
    await engine.dispose()


async def test_admission_lookup_releases_connection(sqlite_engine):
    make_session = async_sessionmaker(bind=sqlite_engine, class_=AsyncSession, expire_on_commit=False)
    video_id, user_id = uuid.uuid4(), uuid.uuid4()

    async with make_session() as setup:
        setup.add(Video(id=video_id, user_id=user_id, title="t"))
        await setup.commit()

    async with make_session() as session:
        video = await VideoRepository(session).get_video(video_id)

        assert not session.in_transaction()
        assert sqlite_engine.pool.checkedout() == 0
        # still usable after the commit
        assert video.user_id == user_id

        await VideoRepository(session).update_video_url(video, "bucket,landscape/abc.mp4")

    async with make_session() as check:
        stored = await check.get(Video, video_id)
        assert stored.video_url == "bucket,landscape/abc.mp4"
