# Utils package

from .common import create_error_response, create_standard_response
from .localization import ResponseMode, get_response_mode, resolve_language
from .multilingual import localize_field, parse_field, parse_json_list
from .response_shaper import shape_entity, shape_response

__all__ = [
    "create_standard_response",
    "create_error_response",
    "ResponseMode",
    "get_response_mode",
    "resolve_language",
    "localize_field",
    "parse_field",
    "parse_json_list",
    "shape_entity",
    "shape_response",
]
