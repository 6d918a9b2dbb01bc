"""
Remote Studio Backend

FastAPI application exposing the viewer state of a remote code workspace.
"""

import logging
from typing import List, Optional

from dotenv import load_dotenv

# Load environment variables before settings are read
load_dotenv()

from fastapi import Depends, FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import get_settings
from .models import (
    ErrorResponse,
    LogEntryModel,
    PathRequest,
    PathsRequest,
    PromptRequest,
    PromptResult,
    RenderedFileModel,
    ToggleResponse,
    WorkspaceState,
)
from .remote_client import RemoteClient
from .workspace import Workspace

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="Remote Studio",
    description="Workbench for a remote code workspace",
    version="1.0.0",
)

# CORS middleware for local development
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Remote client and workspace state (singletons)
remote_client: Optional[RemoteClient] = None
workspace: Optional[Workspace] = None


@app.on_event("startup")
async def startup_event():
    """Initialize services on startup."""
    global remote_client, workspace
    settings = get_settings()
    remote_client = RemoteClient(
        base_url=settings.api_base_url,
        timeout=settings.request_timeout,
    )
    workspace = Workspace(remote_client, log_capacity=settings.log_capacity)
    workspace.prober.start()
    logger.info(f"Remote Studio starting on {settings.host}:{settings.port}")
    logger.info(f"Remote workspace: {settings.api_base_url}")


@app.on_event("shutdown")
async def shutdown_event():
    """Clean up services on shutdown."""
    if remote_client:
        await remote_client.close()
    logger.info("Remote Studio shut down")


def get_workspace() -> Workspace:
    """Dependency returning the live workspace."""
    if workspace is None:
        raise HTTPException(status_code=503, detail="Workspace not initialized")
    return workspace


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    settings = get_settings()
    return {
        "status": "ok",
        "service": "Remote Studio",
        "remote": settings.api_base_url,
    }


# ============================================================================
# Workspace Endpoints
# ============================================================================

@app.get("/api/workspace", response_model=WorkspaceState)
async def get_workspace_state(ws: Workspace = Depends(get_workspace)):
    """Full viewer state: tree, tabs, selection, logs and status."""
    return ws.snapshot()


@app.post("/api/status/check", response_model=WorkspaceState)
async def check_status(ws: Workspace = Depends(get_workspace)):
    """Probe the remote host and report the new status."""
    await ws.check_status()
    return ws.snapshot()


@app.get("/api/logs", response_model=List[LogEntryModel])
async def get_logs(ws: Workspace = Depends(get_workspace)):
    """Activity log, newest first."""
    return [LogEntryModel(timestamp=e.timestamp, message=e.message) for e in ws.log]


# ============================================================================
# File Endpoints
# ============================================================================

@app.post("/api/files/refresh", response_model=WorkspaceState)
async def refresh_files(ws: Workspace = Depends(get_workspace)):
    """Reload the remote name list and rebuild the tree."""
    await ws.refresh_names()
    return ws.snapshot()


@app.post("/api/files/fetch", response_model=WorkspaceState)
async def fetch_files(request: PathsRequest, ws: Workspace = Depends(get_workspace)):
    """Fetch the given files in a single batch."""
    await ws.fetch(request.paths)
    return ws.snapshot()


@app.post("/api/files/sync", response_model=WorkspaceState)
async def sync_files(ws: Workspace = Depends(get_workspace)):
    """Fetch every known file in a single batch."""
    await ws.sync_all()
    return ws.snapshot()


@app.post("/api/files/open", response_model=WorkspaceState)
async def open_file(request: PathRequest, ws: Workspace = Depends(get_workspace)):
    """Open a file: select it if cached, fetch it otherwise."""
    await ws.open_file(request.path)
    return ws.snapshot()


@app.post("/api/files/select", response_model=WorkspaceState)
async def select_file(request: PathRequest, ws: Workspace = Depends(get_workspace)):
    """Select an already cached file."""
    try:
        ws.select(request.path)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"File not loaded: {request.path}")
    return ws.snapshot()


@app.post("/api/files/close", response_model=WorkspaceState)
async def close_file(request: PathRequest, ws: Workspace = Depends(get_workspace)):
    """Drop a file from the cache (close its tab)."""
    if not ws.close_file(request.path):
        raise HTTPException(status_code=404, detail=f"File not loaded: {request.path}")
    return ws.snapshot()


@app.get("/api/files/view", response_model=RenderedFileModel)
async def view_file(
    path: Optional[str] = Query(None, description="File to render; defaults to the selection"),
    ws: Workspace = Depends(get_workspace),
):
    """Syntax-coloured markup for a cached file."""
    rendered = ws.render(path) if path else ws.render_selected()
    if rendered is None:
        raise HTTPException(status_code=404, detail=f"Nothing to render: {path or 'no selection'}")
    return RenderedFileModel(path=rendered.path, html=rendered.html, line_count=rendered.line_count)


@app.post("/api/folders/toggle", response_model=ToggleResponse)
async def toggle_folder(request: PathRequest, ws: Workspace = Depends(get_workspace)):
    """Expand or collapse a folder."""
    try:
        expanded = ws.toggle_folder(request.path)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Not a folder: {request.path}")
    return ToggleResponse(path=request.path, expanded=expanded)


# ============================================================================
# Agent Endpoint
# ============================================================================

@app.post("/api/prompt", response_model=PromptResult)
async def send_prompt(request: PromptRequest, ws: Workspace = Depends(get_workspace)):
    """Forward a free-text instruction to the remote agent."""
    return await ws.send_prompt(request.prompt)


# ============================================================================
# Error Handlers
# ============================================================================

@app.exception_handler(HTTPException)
async def http_exception_handler(request, exc):
    """Custom handler for HTTP exceptions."""
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(
            error=exc.detail,
            detail=None,
        ).dict(),
    )


@app.exception_handler(Exception)
async def general_exception_handler(request, exc):
    """Catch-all handler for unexpected errors."""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content=ErrorResponse(
            error="Internal server error",
            detail=str(exc),
        ).dict(),
    )


def run():
    """Console entry point."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "remote_studio.main:app",
        host=settings.host,
        port=settings.port,
        log_level="info",
    )


if __name__ == "__main__":
    run()
