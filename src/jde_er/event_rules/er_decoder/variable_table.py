# jde_er/event_rules/er_decoder/variable_table.py

import logging

from jde_er.event_rules.entities.event_variable import EventLevelVariable

logger = logging.getLogger(__name__)


class EventVariableTable:
    """Event-local variables declared so far in one decompile pass.

    Built forward as <GBRVAR> blocks are visited, so a reference resolves only
    after its declaration. Owned by a single interpreter; not shared across passes.
    """

    def __init__(self) -> None:
        self._variables: dict[str, EventLevelVariable] = {}

    def declare(self, variable_id: str, display_name: str, alias: str) -> EventLevelVariable:
        # Redeclaration only happens on malformed input; last write wins
        if variable_id in self._variables:
            logger.debug("Event variable %s redeclared as %s", variable_id, display_name)
        variable = EventLevelVariable(variable_id=variable_id, variable_name=display_name, alias=alias)
        self._variables[variable_id] = variable
        return variable

    def add(self, variable: EventLevelVariable) -> None:
        self.declare(variable.variable_id, variable.variable_name, variable.alias)

    def resolve(self, variable_id: str | None) -> str | None:
        """Display name of a declared variable, or None."""
        if variable_id is None or not variable_id.strip():
            return None
        variable = self._variables.get(variable_id)
        return variable.variable_name if variable is not None else None

    def clear(self) -> None:
        self._variables.clear()

    def __len__(self) -> int:
        return len(self._variables)

    def __contains__(self, variable_id: object) -> bool:
        return variable_id in self._variables
