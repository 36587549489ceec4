from .user import User
from .video_model import Video

__all__ = ["User", "Video"]
