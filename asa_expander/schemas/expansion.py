"""Schemas for configuration expansion operations."""
from typing import List, Optional
from pydantic import BaseModel, Field


class ExpandOptions(BaseModel):
    """Per-request overrides of the expansion feature toggles."""
    substitute_names: Optional[bool] = None
    group_commands: Optional[bool] = None
    annotate_nat: Optional[bool] = None
    expand_access_lists: Optional[bool] = None


class ExpandTextRequest(BaseModel):
    """Request schema for expanding configuration text sent as JSON."""
    content: str = Field(..., min_length=1, description="Raw ASA/PIX configuration text")
    filename: Optional[str] = None
    options: ExpandOptions = Field(default_factory=ExpandOptions)


class ExpansionStats(BaseModel):
    """Statistics about one expansion run."""
    version: Optional[float] = None
    pre83: bool
    input_lines: int
    output_lines: int
    catalog_size: int
    expanded_entries: int
    generated_lines: int


class ExpandResponse(BaseModel):
    """Response schema for an expanded configuration."""
    filename: Optional[str] = None
    content: str
    lines: List[str]
    stats: ExpansionStats
