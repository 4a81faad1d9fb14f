from fastapi import APIRouter, File, HTTPException, UploadFile, status
from fastapi.responses import Response

from hybrid_app.schemas.load_profile import (
    LoadImportResponse,
    LoadPattern,
    LoadTemplateRequest,
)
from hybrid_engine.catalog import LOAD_PATTERNS
from hybrid_engine.load import LoadProfile, export_load_csv, parse_load_csv

router = APIRouter()

MAX_UPLOAD_BYTES = 64 * 1024


@router.get("/patterns", response_model=list[LoadPattern], summary="Built-in load patterns")
async def list_patterns() -> list[LoadPattern]:
    patterns = []
    for key, (label, values) in LOAD_PATTERNS.items():
        profile = LoadProfile(hourly_kw=values)
        patterns.append(LoadPattern(
            key=key,
            label=label,
            hourly_kw=list(profile.hourly_kw),
            average_kw=round(profile.average_kw, 1),
            peak_kw=round(profile.peak_kw, 1),
        ))
    return patterns


@router.post("/template", summary="Download a load profile as CSV")
async def download_template(body: LoadTemplateRequest) -> Response:
    return Response(
        content=export_load_csv(body.hourly_kw),
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="load_profile_template.csv"'},
    )


@router.post(
    "/import",
    response_model=LoadImportResponse,
    summary="Import a load profile CSV",
    description="Reads the second column of an Hour,Load_kW CSV. Invalid rows fall back to 500 kW.",
)
async def import_profile(file: UploadFile = File(...)) -> LoadImportResponse:
    raw = await file.read()
    if len(raw) > MAX_UPLOAD_BYTES:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail="CSV file too large",
        )
    try:
        text = raw.decode("utf-8-sig")
    except UnicodeDecodeError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="CSV must be UTF-8 text",
        )

    values = parse_load_csv(text)
    profile = LoadProfile(hourly_kw=tuple(values))
    return LoadImportResponse(
        hourly_kw=values,
        average_kw=round(profile.average_kw, 1),
        peak_kw=round(profile.peak_kw, 1),
    )
