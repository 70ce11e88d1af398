"""Records schema definitions."""
from __future__ import annotations

from typing import Any, Dict, List

from pydantic import BaseModel


class PagedRecords(BaseModel):
    rows: List[Dict[str, Any]]
    total_count: int
    offset: int
    page_size: int
