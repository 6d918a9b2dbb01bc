"""
Remote Studio API Models

Pydantic models for the remote workspace wire format and for the
workbench's own request/response validation.
"""

from typing import List, Optional
from pydantic import BaseModel, Field


# Remote workspace wire models

class NamesResponse(BaseModel):
    """Response of the remote name-list endpoint."""
    names: Optional[List[str]] = Field(None, description="Flat list of remote file paths")


class CodesRequest(BaseModel):
    """Request for the contents of one or more remote files."""
    names: List[str] = Field(..., description="Paths to fetch, in order")


class PromptRequest(BaseModel):
    """Free-text instruction forwarded to the remote agent."""
    prompt: str = Field(..., description="Instruction text")


class PromptResponse(BaseModel):
    """Response of the remote prompt endpoint."""
    status: Optional[str] = Field(None, description="Free-text status, used for logging only")


# Workbench request models

class PathsRequest(BaseModel):
    """Request naming several workspace paths."""
    paths: List[str] = Field(..., description="Workspace paths")


class PathRequest(BaseModel):
    """Request naming a single workspace path."""
    path: str = Field(..., description="Workspace path")


# Workbench response models

class TreeNodeModel(BaseModel):
    """One node of the navigation tree."""
    name: str = Field(..., description="Last path segment")
    path: str = Field(..., description="Full path")
    kind: str = Field(..., description="'file' or 'folder'")
    expanded: bool = Field(False, description="Whether the folder is expanded")
    cached: bool = Field(False, description="Whether the file content is cached")
    children: Optional[List["TreeNodeModel"]] = Field(None, description="Children (folders only)")


class TreeRowModel(BaseModel):
    """One visible row of the explorer, in display order."""
    depth: int = Field(..., description="Nesting level, 0 for top-level entries")
    name: str
    path: str
    kind: str = Field(..., description="'file' or 'folder'")


class LogEntryModel(BaseModel):
    """Single activity log line."""
    timestamp: str
    message: str


class WorkspaceState(BaseModel):
    """Full snapshot of the viewer state."""
    status: str = Field(..., description="'checking', 'online' or 'offline'")
    loading: bool = Field(False, description="Whether any remote call is in flight")
    names: List[str] = Field(default_factory=list)
    tree: List[TreeNodeModel] = Field(default_factory=list)
    rows: List[TreeRowModel] = Field(default_factory=list, description="Rows under expanded folders only")
    open_files: List[str] = Field(default_factory=list, description="Cached paths, in tab order")
    selected: Optional[str] = Field(None, description="Currently selected path")
    logs: List[LogEntryModel] = Field(default_factory=list, description="Newest first")


class RenderedFileModel(BaseModel):
    """Syntax-coloured contents of a cached file."""
    path: str
    html: str = Field(..., description="HTML-safe markup with styling spans")
    line_count: int


class ToggleResponse(BaseModel):
    """Result of toggling a folder."""
    path: str
    expanded: bool


class PromptResult(BaseModel):
    """Outcome of forwarding a prompt."""
    sent: bool
    status: Optional[str] = None


# Error response model

class ErrorResponse(BaseModel):
    """Error response."""
    error: str = Field(..., description="Error message")
    detail: Optional[str] = Field(None, description="Additional error details")
