"""PDF report download endpoint."""
import re

from fastapi import APIRouter, HTTPException, Request, status
from fastapi.responses import StreamingResponse
from starlette.concurrency import run_in_threadpool

from hybrid_app.api.v1.calculations import build_config
from hybrid_app.core.rate_limit import report_limiter
from hybrid_app.schemas.project import ReportRequest
from hybrid_engine.simulation.runner import (
    CalculationError,
    InvalidInputError,
    run_calculation,
)

router = APIRouter()


def _report_filename(name: str, revision: str) -> str:
    return f"{re.sub(r'[^a-zA-Z0-9]', '_', name)}_Rev{revision}.pdf"


@router.post(
    "",
    summary="Download PDF report",
    description="Run a calculation and render the feasibility report as a PDF.",
)
async def download_pdf_report(body: ReportRequest, request: Request):
    report_limiter.check(request)
    config = build_config(body.calculation)

    try:
        results = await run_in_threadpool(run_calculation, config)
    except (InvalidInputError, CalculationError) as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e)
        )

    from hybrid_engine.reporting.pdf_report import generate_pdf_report

    info = body.project_info
    pdf_buffer = await run_in_threadpool(generate_pdf_report, results, info.model_dump())

    filename = _report_filename(info.name, info.revision)
    return StreamingResponse(
        pdf_buffer,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
