"""
Receipt Storage

Abstract object-storage interface for receipt uploads plus a local
filesystem implementation. The ledger stores the returned URL verbatim
and never checks that it is reachable.
"""
import logging
import re
import uuid
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

from crewcost.config import CrewCostConfig, get_config
from crewcost.domain.exceptions import ValidationError

logger = logging.getLogger(__name__)

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


class ReceiptStore(ABC):
    """
    Abstract interface for receipt storage.

    Any backend (local disk, blob service) must accept a file of at most
    max_bytes and return a URL for it.
    """

    max_bytes: int

    @abstractmethod
    def save(self, filename: str, content_type: str, data: bytes) -> str:
        """
        Store a receipt file.

        Args:
            filename: Client-supplied file name
            content_type: MIME type of the upload
            data: File contents

        Returns:
            URL under which the receipt can be fetched

        Raises:
            ValidationError: If the upload is not an accepted receipt
        """
        pass


def sanitize_filename(filename: str) -> str:
    """Reduce a client file name to a safe basename."""
    name = Path(filename or "").name
    name = _UNSAFE_CHARS.sub("_", name).strip("._")
    return name or "receipt"


class LocalReceiptStore(ReceiptStore):
    """Writes receipts into a directory that is served as static files."""

    def __init__(
        self,
        config: Optional[CrewCostConfig] = None,
        directory: Optional[Path] = None,
        max_bytes: Optional[int] = None
    ):
        self.config = config or get_config()
        self.directory = Path(directory) if directory else self.config.receipt_directory
        self.public_prefix = self.config.receipt_public_prefix
        self.max_bytes = max_bytes or self.config.receipt_max_bytes

    def validate(self, content_type: str, data: bytes) -> None:
        allowed = self.config.receipt_content_types
        if content_type not in allowed:
            raise ValidationError(
                "file", f"content type '{content_type}' not allowed; use one of {', '.join(allowed)}"
            )
        if not data:
            raise ValidationError("file", "upload is empty")
        if len(data) > self.max_bytes:
            raise ValidationError(
                "file", f"upload exceeds {self.max_bytes} bytes"
            )

    def save(self, filename: str, content_type: str, data: bytes) -> str:
        self.validate(content_type, data)

        self.directory.mkdir(parents=True, exist_ok=True)
        stored_name = f"{uuid.uuid4().hex}-{sanitize_filename(filename)}"
        (self.directory / stored_name).write_bytes(data)

        url = f"{self.public_prefix}/{stored_name}"
        logger.info(f"Stored receipt {stored_name} ({len(data)} bytes)")
        return url
