#!/usr/bin/env python3
"""
Health Routes - Liveness check
"""

from fastapi import APIRouter


def create_health_routes() -> APIRouter:
    router = APIRouter()

    @router.get("/health")
    def health():
        return {"status": "ok"}

    return router
