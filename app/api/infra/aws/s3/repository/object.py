from typing import Dict
import asyncio

from app.api.infra.aws.s3 import get_s3_client
from app.api.infra.aws.s3.entity.object import S3Object, S3ObjectHead


async def put_object(obj: S3Object, bucket_name: str) -> Dict:
    """Put an object, replacing whatever is stored under the same key."""
    loop = asyncio.get_running_loop()
    client = get_s3_client()

    def _put():
        return client.put_object(
            Bucket=bucket_name,
            Body=obj.body,
            ContentType=obj.content_type,
            Key=obj.key
        )

    return await loop.run_in_executor(None, _put)


async def head_object(key: str, bucket_name: str) -> S3ObjectHead:
    loop = asyncio.get_running_loop()
    client = get_s3_client()

    def _head():
        return client.head_object(Bucket=bucket_name, Key=key)

    head = await loop.run_in_executor(None, _head)
    return S3ObjectHead(**head)


def generate_presigned_get_url(key: str, bucket_name: str, expires_in: int = 300) -> str:
    """Generate a presigned URL for getting an S3 object

    Signing is local to botocore, no request is sent to S3.

    Args:
        key (str): S3 object key
        bucket_name (str): S3 bucket name
        expires_in (int, optional): URL expiration time in seconds. Defaults to 300.

    Returns:
        str: Presigned URL
    """
    client = get_s3_client()
    return client.generate_presigned_url(
        ClientMethod="get_object",
        Params={
            "Bucket": bucket_name,
            "Key": key,
        },
        ExpiresIn=expires_in,
        HttpMethod="GET")
