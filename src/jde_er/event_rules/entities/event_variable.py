from pydantic import BaseModel, ConfigDict


class EventLevelVariable(BaseModel):
    """An event-local variable declared by a <GBRVAR …/> block.

    variable_name is already formatted for display: "{declared name} [{alias}]".
    """

    variable_id: str
    variable_name: str
    alias: str
    model_config = ConfigDict(from_attributes=True, frozen=True)
