import base64
import secrets

ASSET_KEY_BYTES = 32
DEFAULT_EXT = ".bin"


def media_type_to_ext(media_type: str) -> str:
    """Map "type/subtype" to ".subtype", anything else to ".bin"."""
    parts = (media_type or "").split("/")
    if len(parts) != 2:
        return DEFAULT_EXT
    return "." + parts[1]


def get_asset_path(media_type: str) -> str:
    """Random URL-safe basename for an asset of the given media type."""
    rand_string = base64.urlsafe_b64encode(secrets.token_bytes(ASSET_KEY_BYTES)).rstrip(b"=").decode("ascii")
    return f"{rand_string}{media_type_to_ext(media_type)}"


def build_storage_key(prefix: str, media_type: str) -> str:
    return f"{prefix}/{get_asset_path(media_type)}"
