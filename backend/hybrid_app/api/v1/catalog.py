from fastapi import APIRouter

from hybrid_engine.catalog import catalog_as_dict

router = APIRouter()


@router.get(
    "",
    summary="Technology catalog",
    description="PV technologies, tracking systems, battery chemistries, diesel classes and reference sites.",
)
async def get_catalog() -> dict:
    return catalog_as_dict()
