from pydantic import BaseModel, Field

from hybrid_app.schemas.calculation import CalculationRequest, LocationIn


class ProjectInfo(BaseModel):
    name: str = Field(default="Hybrid Power Project", max_length=255)
    client: str = Field(default="", max_length=255)
    reference: str = Field(default="", max_length=255)
    engineer: str = Field(default="", max_length=255)
    date: str = Field(default="", max_length=32)
    revision: str = Field(default="A", max_length=16)


class ProjectSnapshot(BaseModel):
    """The subset of a project that is shared by link."""
    loads: list[float] = Field(min_length=24, max_length=24)
    scale: float = Field(default=1.0, ge=0)
    renewable_target_pct: float = Field(default=70.0, ge=0, le=100)
    location: LocationIn = Field(default_factory=LocationIn)
    project_info: ProjectInfo = Field(default_factory=ProjectInfo)


class ShareTokenResponse(BaseModel):
    token: str


class ReportRequest(BaseModel):
    calculation: CalculationRequest = Field(default_factory=CalculationRequest)
    project_info: ProjectInfo = Field(default_factory=ProjectInfo)
