import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import uvicorn

from core.config import settings
from core.exceptions import (
    AuthenticationRequiredError,
    AuthorizationError,
    FlashcardsError,
    NotFoundError,
    ReferenceError,
    ValidationError,
)
from core.logger import configure_logging
from routers import (
    account as account_router,
    flashcard as flashcard_router,
    generation as generation_router,
)

configure_logging()
logger = logging.getLogger(__name__)

app = FastAPI(title="Flashcards")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(account_router.router)
app.include_router(generation_router.router)
app.include_router(flashcard_router.router)

# Most specific first; lookup walks the exception's MRO.
ERROR_STATUS = {
    ValidationError: status.HTTP_400_BAD_REQUEST,
    ReferenceError: status.HTTP_409_CONFLICT,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    AuthenticationRequiredError: status.HTTP_401_UNAUTHORIZED,
    AuthorizationError: status.HTTP_403_FORBIDDEN,
}


@app.exception_handler(FlashcardsError)
async def flashcards_error_handler(request: Request, exc: FlashcardsError):
    code = next(
        (ERROR_STATUS[cls] for cls in type(exc).__mro__ if cls in ERROR_STATUS),
        status.HTTP_500_INTERNAL_SERVER_ERROR,
    )
    if code >= 500:
        logger.error("Unhandled store error on %s %s: %s", request.method, request.url.path, exc)
    headers = {"WWW-Authenticate": "Bearer"} if code == status.HTTP_401_UNAUTHORIZED else None
    return JSONResponse(
        status_code=code,
        content={"detail": str(exc), "error": type(exc).__name__},
        headers=headers,
    )


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    messages = "; ".join(
        "{}: {}".format(".".join(str(part) for part in err.get("loc", ())), err.get("msg", "Invalid data"))
        for err in exc.errors()
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": messages, "error": ValidationError.__name__},
    )


@app.get("/status")
async def status_check():
    return {"status": "ok"}

if __name__ == "__main__":
    uvicorn.run("main:app", reload=True, host="127.0.0.1", port=8000)
