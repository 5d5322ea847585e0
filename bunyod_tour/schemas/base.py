from typing import Any, Union

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

# 다국어 입력: {"ru": ..., "en": ...} 객체, JSON 문자열 또는 일반 문자열
MultilingualInput = Union[dict[str, Any], str]


class CamelModel(BaseModel):
    """camelCase 본문을 받는 기본 스키마 (snake_case 도 허용)"""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    def provided(self) -> dict[str, Any]:
        """요청 본문에 실제로 포함된 필드만 반환 (snake_case 키)"""
        return {name: getattr(self, name) for name in self.model_fields_set}
