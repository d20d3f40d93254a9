from pydantic import BaseModel, ConfigDict


class DecompileResult(BaseModel):
    """Readable event rule text plus the keys it was produced from."""

    root_event_spec_key: str = ""
    readable_text: str = ""
    template_name: str | None = None
    status_message: str = ""
    model_config = ConfigDict(from_attributes=True)
