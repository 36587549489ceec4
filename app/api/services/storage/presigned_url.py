from typing import Dict, Any, Optional, Tuple

from botocore.exceptions import BotoCoreError, ClientError
from loguru import logger as custom_logger

from app.api.infra.aws.s3.repository.object import generate_presigned_get_url
from app.core.config import PRESIGNED_URL_EXPIRATION

REFERENCE_SEPARATOR = ","


def build_video_reference(bucket_name: str, s3_key: str) -> str:
    """Stored form of a video location, ``bucket,key``."""
    return f"{bucket_name}{REFERENCE_SEPARATOR}{s3_key}"


def parse_video_reference(reference: Optional[str]) -> Optional[Tuple[str, str]]:
    if not reference:
        return None
    parts = reference.split(REFERENCE_SEPARATOR, 1)
    if len(parts) < 2 or not parts[0] or not parts[1]:
        return None
    return parts[0], parts[1]


class PresignedURLIssuer:
    """Mint short-lived GET URLs for stored videos.

    Nothing is cached: the stored record keeps only the bucket/key reference
    and every read asks for a new URL.
    """

    def __init__(self, expires_in: int = PRESIGNED_URL_EXPIRATION):
        self.expires_in = expires_in

    def generate_presigned_url(self, bucket_name: str, s3_key: str, expires_in: Optional[int] = None) -> str:
        try:
            return generate_presigned_get_url(s3_key, bucket_name, expires_in or self.expires_in)
        except (BotoCoreError, ClientError) as e:
            custom_logger.error(f"Couldn't presign {bucket_name}/{s3_key}: {str(e)}")
            raise

    def sign_video(self, video: Dict[str, Any]) -> Dict[str, Any]:
        """Return a copy of the serialized video with ``video_url`` presigned.

        Records without a usable reference are returned unchanged.
        """
        reference = parse_video_reference(video.get("video_url"))
        if reference is None:
            return video

        bucket_name, s3_key = reference
        signed = dict(video)
        signed["video_url"] = self.generate_presigned_url(bucket_name, s3_key)
        return signed
