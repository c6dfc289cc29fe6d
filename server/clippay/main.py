from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .access import AccessControlMiddleware, AccessRouter, PostgresAccountStore
from .config import load_settings
from .database import close_pool, init_db, init_pool


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    settings = load_settings()
    print(f"[ClipPay] Starting server on port {settings.port}")

    # Initialize database
    await init_pool(settings.database_url)
    await init_db()
    print("[ClipPay] Database initialized")

    yield

    # Cleanup
    await close_pool()
    print("[ClipPay] Server shutdown complete")


app = FastAPI(
    title="ClipPay API",
    description="Brand and creator marketplace: onboarding, campaigns, payouts",
    version="0.1.0",
    lifespan=lifespan,
)

# Onboarding gate for protected paths
access_router = AccessRouter(PostgresAccountStore())
app.state.access_router = access_router
app.add_middleware(AccessControlMiddleware, access_router=access_router)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:3000",
        "http://localhost:5173",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

from .routes import account_router, auth_router, onboarding_router

app.include_router(auth_router, prefix="/api/auth", tags=["auth"])
app.include_router(onboarding_router, prefix="/onboarding", tags=["onboarding"])
app.include_router(account_router, tags=["account"])


@app.get("/health")
async def health_check():
    return {"status": "healthy", "service": "clippay"}
