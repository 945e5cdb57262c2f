from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import List, Sequence, Tuple

from pydantic import BaseModel, Field, TypeAdapter


logger = logging.getLogger(__name__)


class DocEntry(BaseModel):
    model_config = {"frozen": True}

    title: str = Field(..., description="Topic title, also used for keyword matching")
    content: str


_DOCS_ADAPTER = TypeAdapter(List[DocEntry])


def load_docs(path: Path) -> Tuple[DocEntry, ...]:
    """Read the reference documentation set, preserving file order."""
    raw = json.loads(Path(path).read_text(encoding="utf-8"))
    docs = tuple(_DOCS_ADAPTER.validate_python(raw))
    logger.info("Loaded %s documentation entries from %s", len(docs), path)
    return docs


def build_reference_text(docs: Sequence[DocEntry]) -> str:
    return "\n\n".join(f"{doc.title}: {doc.content}" for doc in docs)
