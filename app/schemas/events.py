from pydantic import BaseModel, Field


class PlantRegisteredPayload(BaseModel):
    plant_id: int
    name: str
    owner: str


class PlantMetricsUpdatedPayload(BaseModel):
    plant_id: int
    health_score: int = Field(ge=0, le=100)
    growth_stage: int = Field(ge=0, le=4)
    timestamp: str  # ISO-8601, UTC


class PlantStatusChangedPayload(BaseModel):
    plant_id: int
    alive: bool


class CaregiverAddedPayload(BaseModel):
    plant_id: int
    caregiver: str
