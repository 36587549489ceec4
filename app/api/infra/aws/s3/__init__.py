from botocore.client import Config

from app.api.infra.aws import session
from app.core.config import (
    S3_BUCKET,
    S3_CONNECT_TIMEOUT,
    S3_ENDPOINT_URL,
    S3_MAX_ATTEMPTS,
    S3_READ_TIMEOUT,
)

s3_bucket = S3_BUCKET

# bounds every S3 call, including those running in executor threads
client_config = Config(
    signature_version="s3v4",
    connect_timeout=S3_CONNECT_TIMEOUT,
    read_timeout=S3_READ_TIMEOUT,
    retries={"max_attempts": S3_MAX_ATTEMPTS, "mode": "standard"},
)


def get_s3_client():
    """S3 client using SigV4 so presigned URLs carry an explicit expiry."""
    return session.client(
        "s3",
        endpoint_url=S3_ENDPOINT_URL,
        config=client_config,
    )
