from pydantic import BaseModel, ConfigDict, Field

from jde_er.event_rules.entities.template_item import DataStructureTemplateItem


class DataStructureTemplate(BaseModel):
    """Parsed data structure template with its items indexed by ItemID."""

    template_name: str
    description: str | None = None
    items_by_id: dict[str, DataStructureTemplateItem] = Field(default_factory=dict)
    model_config = ConfigDict(from_attributes=True)

    def try_get_item(self, item_id: str | None) -> DataStructureTemplateItem | None:
        """Resolve a template item by its ItemID (exact, case-sensitive)."""
        if item_id is None or not item_id.strip():
            return None
        return self.items_by_id.get(item_id)
