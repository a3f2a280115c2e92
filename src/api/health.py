from __future__ import annotations

from datetime import date

from fastapi import APIRouter

from src.shared.response import Meta, ResponseEnvelope


router = APIRouter(tags=["health"])


@router.get("/health")
def health_check() -> ResponseEnvelope[dict]:
    meta = Meta(as_of_date=date.today().isoformat(), source="system")
    return ResponseEnvelope(data={"status": "ok"}, meta=meta)
