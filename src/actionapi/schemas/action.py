from typing import Any

from pydantic import BaseModel, SerializerFunctionWrapHandler, model_serializer

from actionapi.services.identifiers import new_id


class Operation(BaseModel):
    name: str
    serial: str = ""

    @model_serializer(mode="wrap")
    def _omit_empty_serial(self, handler: SerializerFunctionWrapHandler) -> dict[str, Any]:
        data = handler(self)
        if not data.get("serial"):
            data.pop("serial", None)
        return data


class ActionRequest(BaseModel):
    id: str
    action: Operation

    @classmethod
    def create(cls, serial: str, name: str) -> "ActionRequest":
        return cls(id=new_id(), action=Operation(name=name, serial=serial))
