from __future__ import annotations

from pathlib import Path
from typing import Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from services.session import MonitorSession, build_default_session


templates = Jinja2Templates(directory=str(Path(__file__).resolve().parent / "templates"))

UNKNOWN = "unknown"


def format_percent(value: Optional[float]) -> str:
    return UNKNOWN if value is None else f"{value:.1f}%"


def format_liters(value: Optional[float]) -> str:
    return UNKNOWN if value is None else f"{value:.3f} L"


templates.env.filters["percent"] = format_percent
templates.env.filters["liters"] = format_liters


def get_session() -> MonitorSession:
    return build_default_session()


router = APIRouter(include_in_schema=False)


@router.get("/ui", name="ui_index", response_class=HTMLResponse)
async def ui_index(
    request: Request,
    session: MonitorSession = Depends(get_session),
) -> HTMLResponse:
    status = session.status()
    table = session.table()
    return templates.TemplateResponse(
        request,
        "ui/index.html",
        {
            "rows": table.rows,
            "status": status,
        },
    )
