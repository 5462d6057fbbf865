import uuid
from typing import Dict, List

from pydantic import BaseModel, Field


class Variable(BaseModel):
    key: str
    value: str = ""
    secret: bool = False  # UI masking hint only
    enabled: bool = True


class Environment(BaseModel):
    """A named set of variables (e.g. "Development", "Staging", "Production")."""

    id: uuid.UUID = Field(default_factory=uuid.uuid4)
    name: str
    variables: List[Variable] = Field(default_factory=list)

    def add_variable(self, key: str, value: str, secret: bool = False, enabled: bool = True) -> Variable:
        variable = Variable(key=key, value=value, secret=secret, enabled=enabled)
        self.variables.append(variable)
        return variable

    def to_map(self) -> Dict[str, str]:
        """Map of enabled variables; disabled ones never take part in resolution."""
        return {variable.key: variable.value for variable in self.variables if variable.enabled}
