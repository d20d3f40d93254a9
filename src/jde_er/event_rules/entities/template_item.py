from pydantic import BaseModel, ConfigDict


class DataStructureTemplateItem(BaseModel):
    """Represents one <Item …/> element of a data structure template (DSTMPL)."""

    id: str  # ItemID, a synthetic sequence number
    alias: str  # Data dictionary alias (DDAlias)
    field_name: str  # Field name used in the template
    display_sequence: str | None = None
    copy_word: str | None = None  # IN / OUT / INOUT hint
    model_config = ConfigDict(from_attributes=True, frozen=True)

    def get_formatted_name(self) -> str:
        return f"{self.field_name} [{self.alias}]"
