"""Object key generation for uploaded images.

Keys look like ``{folder}/{owner_id}-{unix_millis}-{uuid4 hex}{ext}``. The
owner segment is dropped while the owning pet has no id yet. The millisecond
timestamp keeps keys human-traceable; the 128-bit random component keeps
them unique for concurrent uploads of the same file to the same owner, so a
key is never handed out twice.
"""

import re
import uuid

from core.models.errors import ValidationError
from core.utils.constants import OWNER_ID_PATTERN
from core.utils.mime import file_extension
from core.utils.time import unix_millis


def generate_object_key(
    folder: str,
    owner_id: str | None,
    original_name: str,
    *,
    timestamp_ms: int | None = None,
    unique_id: str | None = None,
) -> str:
    """Build a collision-resistant object key.

    Args:
        folder: Logical namespace such as ``pets``
        owner_id: Owning entity id, or None before it exists
        original_name: User-supplied file name, used only for its extension
        timestamp_ms: Override for the unix-millisecond component
        unique_id: Override for the random component

    Returns:
        The object key

    Raises:
        ValidationError: If the folder is empty or the owner id would add
            path segments to the key
    """
    folder = (folder or "").strip().strip("/")
    if not folder:
        raise ValidationError(
            message="Folder must not be empty",
            details={"folder": folder},
        )

    if owner_id and not re.fullmatch(OWNER_ID_PATTERN, owner_id):
        raise ValidationError(
            message="Invalid owner id for object key",
            details={"owner_id": owner_id},
        )

    millis = timestamp_ms if timestamp_ms is not None else unix_millis()
    random_part = unique_id or uuid.uuid4().hex
    extension = file_extension(original_name or "")

    if owner_id:
        return f"{folder}/{owner_id}-{millis}-{random_part}{extension}"

    return f"{folder}/{millis}-{random_part}{extension}"
