import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from app.api.db.base import Base

class Video(Base):
    __tablename__ = "videos"

    id            = sa.Column(UUID(as_uuid=True), primary_key=True,
                              server_default=sa.text("gen_random_uuid()"))
    user_id       = sa.Column(UUID(as_uuid=True),
                              sa.ForeignKey("users.id", ondelete="CASCADE"),
                              nullable=False)
    title         = sa.Column(sa.String(255), nullable=False)
    description   = sa.Column(sa.Text, nullable=True)
    thumbnail_url = sa.Column(sa.Text, nullable=True)
    video_url     = sa.Column(sa.Text, nullable=True)             # "bucket,key", never a URL
    created_at    = sa.Column(sa.DateTime(timezone=True), nullable=False,
                              server_default=sa.text("NOW()"))
    updated_at    = sa.Column(sa.DateTime(timezone=True), nullable=False,
                              server_default=sa.text("NOW()"))

    user = relationship("User", back_populates="videos", lazy="select")

    __table_args__ = (
        sa.Index("idx_videos_user_id", "user_id"),
    )

    def to_dict(self) -> dict:
        return {
            "id": str(self.id),
            "user_id": str(self.user_id),
            "title": self.title,
            "description": self.description,
            "thumbnail_url": self.thumbnail_url,
            "video_url": self.video_url,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
