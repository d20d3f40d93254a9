from pydantic import BaseModel, ConfigDict


class DataDictionaryTitle(BaseModel):
    """Title text for a data dictionary item (DTAI)."""

    data_item: str
    title1: str | None = None
    title2: str | None = None
    model_config = ConfigDict(from_attributes=True)

    @property
    def combined_title(self) -> str | None:
        part1 = (self.title1 or "").strip()
        part2 = (self.title2 or "").strip()
        if not part1:
            return part2 or None
        if not part2:
            return part1
        return f"{part1} {part2}"
