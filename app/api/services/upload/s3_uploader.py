import asyncio
from pathlib import Path
from typing import Dict, Any

from botocore.exceptions import BotoCoreError, ClientError
from loguru import logger as custom_logger

from app.api.infra.aws.s3 import s3_bucket
from app.api.infra.aws.s3.entity.object import S3Object
from app.api.infra.aws.s3.repository.object import head_object, put_object
from app.core.config import UPLOAD_TIMEOUT


class S3Uploader:
    """Upload processed videos to the S3 bucket."""

    def __init__(self, bucket_name: str = s3_bucket, timeout: float = UPLOAD_TIMEOUT):
        self.bucket_name = bucket_name
        self.timeout = timeout

    async def upload_file(self, file_path: str, s3_key: str, content_type: str) -> Dict[str, Any]:
        """
        Stream a local file to S3, replacing any object at the same key.

        Args:
            file_path: Local file to upload
            s3_key: Full S3 key
            content_type: MIME type stored with the object

        Returns:
            {'success': bool, 'data': {'s3_key', 's3_url', 'bucket_name', 'size'}, 'error': str}
        """
        try:
            file_size = Path(file_path).stat().st_size
            custom_logger.info(f"Uploading to S3: {s3_key}, size: {file_size:,} bytes")

            with open(file_path, 'rb') as body:
                s3_object = S3Object(
                    body=body,
                    content_length=file_size,
                    content_type=content_type,
                    key=s3_key,
                    last_modified=None
                )
                await asyncio.wait_for(put_object(s3_object, self.bucket_name), timeout=self.timeout)

            head = await asyncio.wait_for(head_object(s3_key, self.bucket_name), timeout=self.timeout)
            if head.content_length is not None and head.content_length != file_size:
                custom_logger.error(
                    f"Stored object size mismatch for {s3_key}: {head.content_length} != {file_size}"
                )
                return {'success': False, 'data': None, 'error': 'Stored object is incomplete'}

            s3_url = f"s3://{self.bucket_name}/{s3_key}"
            custom_logger.info(f"Upload completed: {s3_url}")

            return {
                'success': True,
                'data': {
                    's3_key': s3_key,
                    's3_url': s3_url,
                    'bucket_name': self.bucket_name,
                    'size': file_size
                },
                'error': None
            }

        except asyncio.TimeoutError:
            custom_logger.error(f"Upload of {s3_key} timed out after {self.timeout:.0f}s")
            return {'success': False, 'data': None, 'error': 'Upload timed out'}
        except (BotoCoreError, ClientError, OSError) as e:
            custom_logger.error(f"Upload failed: {str(e)}", exc_info=True)
            return {'success': False, 'data': None, 'error': str(e)}
