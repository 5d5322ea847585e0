"""
다국어 필드 파싱 및 현지화 유틸리티

Stored multilingual values come in three shapes:

* an already-decoded mapping ``{"ru": "...", "en": "..."}``
* a string holding JSON for such a mapping (``'{"ru": "...", "en": "..."}'``)
* a legacy plain string written before the multilingual migration

``MultilingualText.from_stored`` classifies a stored value into exactly one
of these kinds. Nothing in this module raises on malformed input.
"""

import enum
import json
from dataclasses import dataclass, field
from typing import Any

DEFAULT_LANGUAGE = "ru"
SUPPORTED_LANGUAGES = ("ru", "en")


class MultilingualKind(enum.Enum):
    PARSED = "parsed"
    RAW_JSON = "raw_json"
    LEGACY = "legacy"


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return str(value)


@dataclass(frozen=True)
class MultilingualText:
    """다국어 값 (태그된 합 타입)"""

    kind: MultilingualKind
    values: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_stored(cls, value: Any) -> "MultilingualText":
        """
        저장된 값을 분류합니다.

        Args:
            value: DB 컬럼 값 (dict, JSON 문자열, 일반 문자열, None)

        Returns:
            MultilingualText
        """
        if value is None:
            return cls(MultilingualKind.PARSED, {lang: "" for lang in SUPPORTED_LANGUAGES})

        if isinstance(value, dict):
            return cls(
                MultilingualKind.PARSED,
                {str(lang): _as_text(text) for lang, text in value.items()},
            )

        text = _as_text(value)
        try:
            decoded = json.loads(text)
        except (json.JSONDecodeError, TypeError, ValueError):
            decoded = None

        if isinstance(decoded, dict):
            return cls(
                MultilingualKind.RAW_JSON,
                {str(lang): _as_text(item) for lang, item in decoded.items()},
            )

        # "Памир", '"quoted"', '123' and friends are all legacy text
        return cls(MultilingualKind.LEGACY, {lang: text for lang in SUPPORTED_LANGUAGES})

    def as_dict(self) -> dict[str, str]:
        return dict(self.values)

    def get(self, lang: str) -> str:
        """요청한 언어, 다른 지원 언어, 임의의 비어있지 않은 값 순서로 반환"""
        preferred = self.values.get(lang, "")
        if preferred.strip():
            return preferred
        for fallback in SUPPORTED_LANGUAGES:
            candidate = self.values.get(fallback, "")
            if candidate.strip():
                return candidate
        for candidate in self.values.values():
            if candidate.strip():
                return candidate
        return ""

    def has(self, lang: str) -> bool:
        return bool(self.values.get(lang, "").strip())


def parse_field(value: Any) -> dict[str, str]:
    """
    다국어 필드를 ``{lang: text}`` 딕셔너리로 정규화합니다.

    Never raises. Legacy plain strings are mirrored into every supported
    language and ``None`` becomes empty strings for each language.
    """
    return MultilingualText.from_stored(value).as_dict()


def localize_field(value: Any, lang: str = DEFAULT_LANGUAGE) -> str:
    """
    다국어 필드를 한 언어의 문자열로 변환합니다.

    Args:
        value: 저장된 값 또는 이미 파싱된 딕셔너리
        lang: 요청 언어

    Returns:
        현지화된 문자열 (없으면 빈 문자열)
    """
    return MultilingualText.from_stored(value).get(lang)


def has_translations(value: Any, languages=SUPPORTED_LANGUAGES) -> bool:
    """모든 언어에 비어있지 않은 값이 있는지 확인"""
    parsed = MultilingualText.from_stored(value)
    return all(parsed.has(lang) for lang in languages)


def normalize_multilingual_input(value: Any) -> dict[str, str] | None:
    """쓰기 요청의 다국어 입력을 저장용 딕셔너리로 변환 (None은 그대로)"""
    if value is None:
        return None
    return parse_field(value)


def parse_json_list(value: Any) -> list:
    """JSON 배열 문자열을 리스트로 변환 (실패 시 빈 리스트)"""
    if value is None or value == "":
        return []
    if isinstance(value, list):
        return value
    try:
        decoded = json.loads(value)
    except (json.JSONDecodeError, TypeError, ValueError):
        return []
    return decoded if isinstance(decoded, list) else []


def dump_json_list(value: Any) -> str | None:
    """리스트를 저장용 JSON 문자열로 변환"""
    if value is None:
        return None
    if isinstance(value, str):
        return json.dumps(parse_json_list(value), ensure_ascii=False)
    return json.dumps(list(value), ensure_ascii=False)
