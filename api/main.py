from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config import SERVER_NAME, SERVER_VERSION, default_config
from logging_config import configure_logging
from app_state import AppState
from startup.manager import StartupManager
from routes.health import router as health_router
from routes.mcp import router as mcp_router
from routes.standards import router as standards_router

# Global state
state = AppState()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan"""
    configure_logging(default_config.logging.level)
    manager = StartupManager(state, default_config)
    manager.initialize()
    yield
    manager.shutdown()


app = FastAPI(
    title="Engineering Standards API",
    description=f"{SERVER_NAME}: index, search and manage engineering standards",
    version=SERVER_VERSION,
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Store state in app for route access
app.state.app_state = state

# Include route modules
app.include_router(health_router)
app.include_router(mcp_router)
app.include_router(standards_router)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=default_config.server.host, port=default_config.server.port)
