"""
Base model for parameter and result DTOs.

Every DTO declares its fields explicitly; server names are the camelCase
aliases of the Python names. Unknown keys are ignored on construction and
in ``from_json``.
"""

from enum import Enum
from typing import Any, Dict, Mapping

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


def to_server_value(value: Any) -> Any:
    """Serialize nested DTOs, geometries, enums and lists for the wire."""
    if hasattr(value, "to_server_json"):
        return value.to_server_json()
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (list, tuple)):
        return [to_server_value(v) for v in value]
    if isinstance(value, Mapping):
        return {k: to_server_value(v) for k, v in value.items()}
    return value


class ServerModel(BaseModel):
    """DTO with server JSON conversion and explicit teardown."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        arbitrary_types_allowed=True,
        extra="ignore",
    )

    @classmethod
    def server_names(cls) -> Dict[str, str]:
        """Map of server (alias) name -> Python field name."""
        return {info.alias or name: name for name, info in cls.model_fields.items()}

    def from_json(self, json_object: Mapping[str, Any]) -> "ServerModel":
        """Copy recognized fields from a server JSON object onto this instance."""
        if not json_object:
            return self
        names = self.server_names()
        for key, value in json_object.items():
            name = names.get(key) or (key if key in type(self).model_fields else None)
            if name:
                setattr(self, name, value)
        return self

    def to_server_json(self) -> Dict[str, Any]:
        """Flatten set fields to their server names."""
        result = {}
        for name, info in type(self).model_fields.items():
            value = getattr(self, name)
            if value is None:
                continue
            result[info.alias or name] = to_server_value(value)
        return result

    def destroy(self) -> None:
        """Null every declared field, destroying owned objects that can be destroyed."""
        for name in type(self).model_fields:
            value = getattr(self, name)
            if value is not None and callable(getattr(value, "destroy", None)):
                value.destroy()
            setattr(self, name, None)
