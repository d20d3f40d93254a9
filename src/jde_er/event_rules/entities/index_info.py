from pydantic import BaseModel, ConfigDict, Field


class IndexInfo(BaseModel):
    """A table index and its key columns, in index order."""

    id: int
    name: str = ""
    is_primary: bool = False
    key_columns: list[str] = Field(default_factory=list)
    model_config = ConfigDict(from_attributes=True)

    @property
    def display_name(self) -> str:
        return f"{self.name} (Primary)" if self.is_primary else self.name
