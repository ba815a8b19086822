from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from chatflow.core.config import settings
from chatflow.core.database import Base, engine

# Import models so SQLAlchemy registers tables for create_all().
import chatflow.models.user  # noqa: F401
import chatflow.models.conversation  # noqa: F401
import chatflow.models.message  # noqa: F401

# Routes
from chatflow.api.routes import ai, auth, chat, session
from chatflow.services.chat_provider import build_chat_provider

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="[%(asctime)s] %(levelname)s %(name)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting up: initializing database...")
    try:
        Base.metadata.create_all(bind=engine)
        logger.info("Database initialized successfully.")
    except Exception:
        logger.exception("Database initialization failed")
        raise

    # Chosen once per process; routes receive it through get_chat_provider.
    app.state.chat_provider = build_chat_provider(settings)

    yield
    logger.info("Shutting down...")


app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ALLOW_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = jsonable_encoder(exc.errors())
    detail = "Invalid request"
    if errors:
        first = errors[0]
        field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        detail = f"{field}: {first.get('msg')}" if field else str(first.get("msg"))
    return JSONResponse(status_code=400, content={"detail": detail, "errors": errors})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


app.include_router(session.router, prefix="/api", tags=["Session"])
app.include_router(auth.router, prefix=f"{settings.RPC_PREFIX}/auth", tags=["Auth"])
app.include_router(chat.router, prefix=f"{settings.RPC_PREFIX}/chat", tags=["Chat"])
app.include_router(ai.router, prefix=f"{settings.RPC_PREFIX}/ai", tags=["AI"])


@app.get("/")
def read_root():
    return {"status": "success", "message": f"Welcome to {settings.PROJECT_NAME} API"}


@app.get("/health")
def health():
    return {"status": "ok"}
