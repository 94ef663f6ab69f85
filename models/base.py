from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class DocumentModel(BaseModel):
    # Stored documents use camelCase keys; attributes stay snake_case.
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_document(self) -> dict:
        return self.model_dump(by_alias=True, exclude={"id"})
