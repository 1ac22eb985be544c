"""공통 Pydantic 요청/응답 스키마 정의.

Common Pydantic request/response schema definitions.
The web client speaks camelCase JSON (``fromId``, ``requestId``, ...),
so every schema derives from ``CamelModel``: fields are declared in
snake_case, accepted under either name, and serialized as camelCase.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """camelCase 직렬화 베이스 스키마.

    Base schema serializing field names as camelCase.
    ``from_attributes`` lets routers return ORM rows directly.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class MessageResponse(CamelModel):
    """범용 메시지 응답 스키마.

    Generic message response schema for simple confirmations.
    Used for delete operations, status changes, and other actions
    that return a human-readable confirmation message.

    Attributes:
        success: 성공 여부 (Always True for 2xx responses)
        message: 응답 메시지 (Response message string)
    """

    success: bool = True
    message: str  # 응답 메시지 (Human-readable confirmation message)
