from pydantic import BaseModel, ConfigDict


class HealthCheckResponseSchema(BaseModel):
    model_config = ConfigDict(frozen=True)

    success: bool
