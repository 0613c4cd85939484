from pydantic import BaseModel, ConfigDict


class FeathersBaseModel(BaseModel):
    model_config = ConfigDict(
        protected_namespaces=(),
        arbitrary_types_allowed=True,
    )
