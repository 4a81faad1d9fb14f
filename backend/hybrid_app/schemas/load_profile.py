from pydantic import BaseModel, Field


class LoadPattern(BaseModel):
    key: str
    label: str
    hourly_kw: list[float]
    average_kw: float
    peak_kw: float


class LoadTemplateRequest(BaseModel):
    hourly_kw: list[float] = Field(min_length=24, max_length=24)


class LoadImportResponse(BaseModel):
    hourly_kw: list[float]
    average_kw: float
    peak_kw: float
