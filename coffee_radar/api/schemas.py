from typing import Optional
from pydantic import BaseModel


class ScanStatus(BaseModel):
    id: int
    started_at: str
    finished_at: str
    status: str
    start_url: str
    pages_visited: int
    total_products: int
    available_products: int
    fresh_products: int
    hrefs_written: int
    output_path: str
    error_message: Optional[str]
    created_at: str
