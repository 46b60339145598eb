import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from smartrooms.config import settings
from smartrooms.db import init_database
from smartrooms.errors import register_exception_handlers
from smartrooms.routers import auth, bookings, rooms, users

logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI):
    "lifespan for initing database"
    init_database()
    logger.info("Database ready")
    yield


app = FastAPI(
    lifespan=lifespan,
    title="Smart rooms",
    description="Meeting room booking with moderator approval, based on FastAPI.",
    version="0.1.0",
    license_info={
        "name": "MIT",
        "url": "https://opensource.org/licenses/MIT",
    },
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["x-access-token", "Origin", "Content-Type", "Accept"],
)
register_exception_handlers(app)


@app.get("/", tags=["health"])
def root():
    return {"message": "Welcome to smart application."}


app.include_router(auth.router)
app.include_router(users.router)
app.include_router(rooms.router)
app.include_router(bookings.router)
