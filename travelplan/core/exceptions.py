# core/exceptions.py
from contextlib import asynccontextmanager
from typing import Optional
from fastapi import HTTPException, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from travelplan.core.logger import logger


@asynccontextmanager
async def store_failure(detail: str, db: Optional[AsyncSession] = None):
    """
    Turn a failing store call into a 500 carrying only `detail`.

    The full error goes to the log; the open transaction, if any, is rolled
    back. HTTPExceptions raised inside the block pass through untouched.
    """
    try:
        yield
    except SQLAlchemyError:
        logger.exception(detail)
        if db is not None:
            await db.rollback()
        raise HTTPException(status_code=500, detail=detail)


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed input is reported as 400 with the pydantic errors attached."""
    return JSONResponse(
        status_code=400,
        content={
            "detail": "Validation error",
            "errors": jsonable_encoder(exc.errors()),
        },
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error"},
    )
