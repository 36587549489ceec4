from __future__ import annotations
import tempfile

from starlette.config import Config
from starlette.datastructures import CommaSeparatedStrings, Secret

config = Config(".env")

API_PREFIX: str = "/api"
VERSION: str = "0.1.0"
PROJECT_NAME: str = config("PROJECT_NAME", default="Tubely")
DEBUG: bool = config("DEBUG", cast=bool, default=False)
ALLOWED_HOSTS: list[str] = config(
    "ALLOWED_HOSTS",
    cast=CommaSeparatedStrings,
    default="",
)

# Auth
JWT_SECRET: Secret = config("JWT_SECRET", cast=Secret)
JWT_ISSUER: str = config("JWT_ISSUER", default="tubely-access")

# AWS / S3
AWS_ACCESS_KEY: str = config("AWS_ACCESS_KEY", default="")
AWS_SECRET_KEY: str = config("AWS_SECRET_KEY", default="")
AWS_REGION: str = config("AWS_REGION", default="us-east-2")
S3_BUCKET: str = config("S3_BUCKET", default="tubely-videos")
S3_ENDPOINT_URL: str | None = config("S3_ENDPOINT_URL", default=None)
PRESIGNED_URL_EXPIRATION: int = config("PRESIGNED_URL_EXPIRATION", cast=int, default=300)  # 5 minutes
S3_CONNECT_TIMEOUT: float = config("S3_CONNECT_TIMEOUT", cast=float, default=10)
S3_READ_TIMEOUT: float = config("S3_READ_TIMEOUT", cast=float, default=60)
S3_MAX_ATTEMPTS: int = config("S3_MAX_ATTEMPTS", cast=int, default=3)

# Upload
MAX_UPLOAD_SIZE: int = config("MAX_UPLOAD_SIZE", cast=int, default=1 << 30)  # 1GB
ACCEPTED_VIDEO_TYPE: str = config("ACCEPTED_VIDEO_TYPE", default="video/mp4")
UPLOAD_FORM_FIELD: str = "video"
COPY_CHUNK_SIZE: int = config("COPY_CHUNK_SIZE", cast=int, default=1024 * 1024)
TEMP_DIR: str = config("TEMP_DIR", default=tempfile.gettempdir())

# External tools
FFPROBE_BIN: str = config("FFPROBE_BIN", default="ffprobe")
FFMPEG_BIN: str = config("FFMPEG_BIN", default="ffmpeg")

# Timeouts (seconds)
PROBE_TIMEOUT: float = config("PROBE_TIMEOUT", cast=float, default=30)
REMUX_TIMEOUT: float = config("REMUX_TIMEOUT", cast=float, default=600)     # 10 minutes
UPLOAD_TIMEOUT: float = config("UPLOAD_TIMEOUT", cast=float, default=300)   # 5 minutes

# Database
DB_HOST: str = config("DB_HOST", default="localhost")
DB_PORT: int = config("DB_PORT", cast=int, default=5432)
DB_USER_NAME: str = config("DB_USER_NAME", default="postgres")
DB_PASSWORD: str = config("DB_PASSWORD", default="")
DB_DATABASE: str = config("DB_DATABASE", default="tubely")
