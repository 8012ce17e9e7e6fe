"""FastAPI server for the queue backend."""

from typing import Optional
import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from src.core.config import Settings, get_settings
from src.c2_queue_store import PersistentQueueStore

# C3 Routes (Application Layer)
from src.c3_health_routes import router as health_router
from src.c3_queue_routes import create_queue_router
from src.c3_queue_routes.queue_routes import PAYLOAD_REQUIRED

logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="Queue Backend API",
    description=(
        "A simple queue management system with REST endpoints to enqueue, dequeue, "
        "and check queue status. No authentication required."
    ),
    version="v1",
    docs_url="/docs",
)

# Add CORS middleware
config = get_settings()
if config.server.enable_cors:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


# Server state
class ServerState:
    """Process-wide server state. Owns the single queue store."""

    def __init__(self):
        self.settings: Optional[Settings] = None
        self.queue_store: Optional[PersistentQueueStore] = None

    def initialize(self, settings: Optional[Settings] = None):
        """Create the queue store from settings unless one is already set."""
        self.settings = settings or get_settings()
        if self.queue_store is not None:
            logger.info(f"Queue store already initialized at {self.queue_store.storage_path}")
            return

        storage = self.settings.storage
        self.queue_store = PersistentQueueStore(
            storage_path=storage.resolve_file_path(),
            persist_timeout=storage.persist_timeout_seconds,
        )
        logger.info("Server state initialized successfully")


# Initialize server state
server_state = ServerState()

app.include_router(health_router)
app.include_router(create_queue_router(server_state))


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Report malformed enqueue bodies as 400, the same as a missing payload."""
    logger.debug(f"Rejected malformed request to {request.url.path}: {exc.errors()}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": PAYLOAD_REQUIRED},
    )


@app.on_event("startup")
async def startup_event():
    """Initialize server on startup."""
    logger.info("Starting Queue Backend API...")
    server_state.initialize()
    logger.info("Server started successfully")


@app.on_event("shutdown")
async def shutdown_event():
    """Flush queue state on shutdown."""
    logger.info("Shutting down Queue Backend API...")
    if server_state.queue_store is None:
        return

    if await server_state.queue_store.flush():
        logger.info("Queue state flushed")
    else:
        logger.warning(f"Queue state could not be flushed to {server_state.queue_store.storage_path}")
