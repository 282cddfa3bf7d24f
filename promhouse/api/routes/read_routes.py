#!/usr/bin/env python3
"""
Read Routes - Prometheus remote read endpoint
"""

import asyncio
import functools
import logging
import threading

from fastapi import APIRouter, HTTPException, Request, Response

from ...database import RowSource
from ...models import ReadSettings
from ..codec import (
    CONTENT_ENCODING,
    CONTENT_TYPE,
    InvalidReadRequestError,
    decode_read_request,
    encode_read_response,
)
from ..queries import ReadError, UnsupportedMatcherError, read_request

logger = logging.getLogger("promhouse.server")


def create_read_routes(source: RowSource, settings: ReadSettings) -> APIRouter:
    """Create remote read routes bound to a row source and settings snapshot."""
    router = APIRouter()

    @router.post("/read")
    async def remote_read(request: Request):
        """Serve a snappy-compressed protobuf ReadRequest."""
        body = await request.body()
        try:
            queries = decode_read_request(body)
        except InvalidReadRequestError as e:
            logger.warning(f"Rejected remote read body: {e}")
            raise HTTPException(status_code=400, detail=str(e))

        # Blocking driver work runs in the default executor; the event tells
        # the worker to stop once this task is cancelled
        cancel = threading.Event()
        loop = asyncio.get_running_loop()
        try:
            results = await loop.run_in_executor(
                None, functools.partial(read_request, queries, source, settings, cancel)
            )
        except asyncio.CancelledError:
            cancel.set()
            logger.info("Remote read cancelled")
            raise
        except UnsupportedMatcherError as e:
            logger.warning(f"Rejected remote read: {e}")
            raise HTTPException(status_code=400, detail=str(e))
        except ReadError as e:
            logger.error(f"Remote read failed: {e}")
            raise HTTPException(status_code=500, detail=str(e))

        logger.debug(f"Remote read: {len(queries)} queries, {sum(len(r.timeseries) for r in results)} series")
        return Response(
            content=encode_read_response(results),
            media_type=CONTENT_TYPE,
            headers={"Content-Encoding": CONTENT_ENCODING},
        )

    return router
