# backend/estimator/models.py

from typing import List, Literal

from pydantic import BaseModel, Field

EstimationMethod = Literal["ai", "smart"]


class InferenceResult(BaseModel):
    area_sqft: float = Field(ge=0)
    complexity: float = Field(ge=1, le=5)
    notes: str
    estimation_method: EstimationMethod
    defaulted_fields: List[str] = Field(default_factory=list)


class Quote(BaseModel):
    rate: float
    complexity_factor: float
    total: float


class EstimateResponse(BaseModel):
    service: str
    area_sqft: float
    complexity: float
    rate: float
    complexity_factor: float
    total: float
    notes: str
    images_analyzed: int
    estimation_method: EstimationMethod


class ErrorResponse(BaseModel):
    error: str
