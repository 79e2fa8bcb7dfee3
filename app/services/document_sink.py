from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict

logger = logging.getLogger(__name__)


def invoice_filename(invoice_number: str) -> str:
    return f"invoice-{invoice_number}.pdf"


class LocalDocumentSink:
    """Writes rendered documents into a directory on disk."""

    def __init__(self, directory: str | Path) -> None:
        self._directory = Path(directory)

    def save(self, filename: str, content: bytes) -> None:
        self._directory.mkdir(parents=True, exist_ok=True)
        target = self._directory / Path(filename).name
        target.write_bytes(content)
        logger.info("Saved %s (%d bytes)", target, len(content))


class MemoryDocumentSink:
    """Keeps rendered documents in memory; used in mock mode and tests."""

    def __init__(self) -> None:
        self.documents: Dict[str, bytes] = {}

    def save(self, filename: str, content: bytes) -> None:
        self.documents[filename] = content
