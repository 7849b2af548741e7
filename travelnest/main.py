import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse
from loguru import logger

from travelnest import db, settings
from travelnest.errors import register_exception_handlers
from travelnest.routers import admin, auth, bookings, payments, rooms, users

ROUTERS = (
    auth.router,
    users.router,
    rooms.router,
    bookings.router,
    admin.router,
    payments.router,
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    await db.ping()
    yield
    await db.close()


async def log_requests(request: Request, call_next):
    started = time.perf_counter()
    status_code = 500
    try:
        response = await call_next(request)
        status_code = response.status_code
        return response
    finally:
        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.info(
            "{} {} {} {:.1f} ms",
            request.method,
            request.url.path,
            status_code,
            elapsed_ms,
        )


def create_app() -> FastAPI:
    app = FastAPI(title="TravelNest API", lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.middleware("http")(log_requests)
    register_exception_handlers(app)

    @app.get("/", response_class=PlainTextResponse, include_in_schema=False)
    async def root() -> str:
        return "Hello from Travel Nest Server.."

    for router in ROUTERS:
        app.include_router(router)
    return app


app = create_app()


def run() -> None:
    import uvicorn

    logger.info("Travel Nest is running on port {}", settings.PORT)
    uvicorn.run("travelnest.main:app", host="0.0.0.0", port=settings.PORT)
