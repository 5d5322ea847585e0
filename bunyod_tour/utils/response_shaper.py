"""
다국어 응답 변환 (public / raw 모드)

Public mode replaces every multilingual key with a plain string in the
requested language. Raw mode, used by the admin panel, keeps the parsed
``{ru, en}`` objects and adds a ``_localized`` sibling holding the strings.

Which keys count as multilingual is decided per entity: serializers whose
entity has a plain-text column under one of these names pass their own
field set (see ``serializers.PRICE_COMPONENT_FIELDS``).
"""

from typing import Any, Iterable

from bunyod_tour.utils.localization import ResponseMode
from bunyod_tour.utils.multilingual import DEFAULT_LANGUAGE, MultilingualText

MULTILINGUAL_FIELDS = frozenset(
    {
        "title",
        "description",
        "shortDesc",
        "name",
        "address",
        "highlights",
        "included",
        "excluded",
        "pickupInfo",
    }
)

LOCALIZED_KEY = "_localized"


def shape_entity(
    entity: Any,
    lang: str = DEFAULT_LANGUAGE,
    include_raw: bool = False,
    fields: Iterable[str] = MULTILINGUAL_FIELDS,
) -> Any:
    """
    직렬화된 엔티티(딕셔너리/리스트)의 다국어 필드를 변환합니다.

    Nested dictionaries and lists are shaped recursively. Keys starting with
    an underscore are copied untouched. A missing (``None``) multilingual
    value is shaped like an empty one: ``""`` in public mode and
    ``{"ru": "", "en": ""}`` in raw mode.

    Shaping is idempotent in raw mode. In public mode it is idempotent
    unless a localized string is itself JSON object text (an editor pasted
    ``'{"ru": ..., "en": ...}'`` into one language): the second pass reads
    that string as stored JSON and localizes it again.

    Args:
        entity: 직렬화된 딕셔너리, 리스트 또는 스칼라
        lang: 응답 언어
        include_raw: True면 파싱된 객체와 ``_localized`` 를 함께 반환
        fields: 다국어로 취급할 키 목록 (중첩된 엔티티에도 동일하게 적용)

    Returns:
        변환된 새 객체 (입력은 변경하지 않음)
    """
    fields = frozenset(fields)

    if isinstance(entity, list):
        return [shape_entity(item, lang, include_raw, fields) for item in entity]
    if not isinstance(entity, dict):
        return entity

    shaped: dict[str, Any] = {}
    localized: dict[str, Any] = dict(entity.get(LOCALIZED_KEY) or {}) if include_raw else {}

    for key, value in entity.items():
        if key.startswith("_"):
            shaped[key] = value
            continue

        if key in fields and (value is None or isinstance(value, (dict, str))):
            text = MultilingualText.from_stored(value)
            if include_raw:
                shaped[key] = text.as_dict()
                localized[key] = text.get(lang)
            else:
                shaped[key] = text.get(lang)
            continue

        shaped[key] = shape_entity(value, lang, include_raw, fields)

    if include_raw and localized:
        shaped[LOCALIZED_KEY] = localized
    return shaped


def shape_response(data: Any, mode: ResponseMode, fields: Iterable[str] = MULTILINGUAL_FIELDS) -> Any:
    """ResponseMode에 따라 단일 엔티티 또는 목록 변환"""
    return shape_entity(data, mode.language, mode.include_raw, fields)
