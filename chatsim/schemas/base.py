from typing import Any

import msgspec


class BaseStruct(msgspec.Struct):
    def to_builtins(self) -> dict[str, Any]:
        """Plain dict with wire field names, for template contexts and HTMX event payloads."""
        return msgspec.to_builtins(self)


class CamelizedBaseStruct(BaseStruct, rename="camel"):
    """Struct serialized with camelCase field names."""
