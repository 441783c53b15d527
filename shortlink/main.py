from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from shortlink.core.config import settings
from shortlink.core.errors import ShortenerError
from shortlink.core.logging_config import configure_logging
from shortlink.db.Connection import database
from shortlink.db.Models import models
from shortlink.api import shortener, users
from shortlink.api.deps import get_engine

logger = configure_logging(settings.LOG_LEVEL)
logger.info(f"Application '{settings.PROJECT_NAME}' starting up with {settings.STORAGE_BACKEND} storage.")

if settings.STORAGE_BACKEND == "sql":
    database.verify_database_connection(get_engine())
    models.Base.metadata.create_all(bind=get_engine())
    logger.info("Database models initialized/checked.")


app = FastAPI(
    title=settings.PROJECT_NAME,
    description="URL Shortener with per-user ownership and bearer tokens"
)

# registered before the routers so /{short_code} does not shadow it
@app.get("/health", tags=["health"])
def health_check():
    return {"status": "healthy", "service": "url-shortener"}

app.include_router(users.router)
app.include_router(shortener.router)

@app.exception_handler(ShortenerError)
async def shortener_exception_handler(request: Request, exc: ShortenerError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.detail}")
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})

@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    fields = [".".join(str(item) for item in err.get("loc", []) if item != "body") for err in exc.errors()]
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": "Invalid request body", "fields": fields},
    )

@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


def run():
    import uvicorn

    uvicorn.run(app, host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    run()
