"""공통 Pydantic 베이스 모델.

Common Pydantic base model.
The public JSON contract uses camelCase keys (``companyId``, ``accessToken``)
while Python code uses snake_case attributes. Responses are serialised by
alias, and requests accept either spelling.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    """camelCase 별칭을 사용하는 API 스키마 베이스.

    Base class for API schemas with camelCase aliases and ORM attribute
    loading (``model_validate(orm_obj)``).
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class MessageResponse(ApiModel):
    """단순 메시지 응답 스키마.

    Plain message response, e.g. {"message": "Logout realizado com sucesso"}.
    """

    message: str
