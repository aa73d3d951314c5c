from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class AppBaseModel(BaseModel):
    # Configuração padrão para todos os nossos schemas.
    # A API fala camelCase (averageRating, createdAt...), o Python snake_case.
    model_config = ConfigDict(
        from_attributes=True,  # Permite criar schemas a partir de objetos ORM
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid"
    )
