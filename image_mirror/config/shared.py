from pydantic import BaseModel, ConfigDict


class MirrorYAMLModel(BaseModel):
    """Base model for image manifest models."""

    model_config = ConfigDict(validate_assignment=True)
