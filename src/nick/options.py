"""
Session Options

Validates and defaults the raw options mapping a Nick session is built from.
The result is a frozen NickOptions model, deep-copied away from the caller's
mapping, that drivers read when starting the browser and opening tabs.

Raw keys follow the camelCase names used across nick (``loadImages``,
``printNavigation``...); the snake_case attribute names are accepted too.
"""

import copy
import math
import re
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any, Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    ValidationInfo,
    field_validator,
    model_validator,
)

from .config import options_from_env
from .errors import InvalidConfiguration

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36"
)
DEFAULT_TIMEOUT = 10000
DEFAULT_WIDTH = 1280
DEFAULT_HEIGHT = 800

# A whitelist/blacklist entry: lower-cased string or compiled regex
UrlMatcher = Union[str, re.Pattern]

_BOOL_FIELDS = (
    "debug",
    "load_images",
    "print_navigation",
    "print_page_errors",
    "print_resource_errors",
    "print_aborts",
)
_NUMBER_FIELDS = ("timeout", "width", "height")
_LIST_FIELDS = ("whitelist", "blacklist")


class NickOptions(BaseModel):
    """Normalized, immutable session options.

    ``load_images`` is the only option without a default: when it was not
    given it stays ``None`` so the backend keeps its own image loading
    behavior, and ``as_dict()`` leaves the key out entirely.

    Unknown keys are kept as extra attributes for backend-specific use.
    Their values are frozen too: mappings become read-only proxies, lists
    become tuples and sets become frozensets.
    """

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        extra="allow",
    )

    debug: bool = False
    load_images: Optional[bool] = Field(default=None, alias="loadImages")
    user_agent: str = Field(default=DEFAULT_USER_AGENT, alias="userAgent")
    timeout: Union[int, float] = DEFAULT_TIMEOUT
    """Milliseconds; passed through to backends, never enforced by Nick."""
    width: Union[int, float] = DEFAULT_WIDTH
    height: Union[int, float] = DEFAULT_HEIGHT
    print_navigation: bool = Field(default=True, alias="printNavigation")
    print_page_errors: bool = Field(default=True, alias="printPageErrors")
    print_resource_errors: bool = Field(default=True, alias="printResourceErrors")
    print_aborts: bool = Field(default=True, alias="printAborts")
    whitelist: tuple[Any, ...] = ()
    blacklist: tuple[Any, ...] = ()

    @field_validator(*_BOOL_FIELDS, mode="before")
    @classmethod
    def _check_bool(cls, value: Any, info: ValidationInfo) -> bool:
        if not isinstance(value, bool):
            raise ValueError(f"{_raw_key(info.field_name)} option must be of type boolean")
        return value

    @field_validator("user_agent", mode="before")
    @classmethod
    def _check_str(cls, value: Any, info: ValidationInfo) -> str:
        if not isinstance(value, str):
            raise ValueError(f"{_raw_key(info.field_name)} option must be of type string")
        return value

    @field_validator(*_NUMBER_FIELDS, mode="before")
    @classmethod
    def _check_positive_number(cls, value: Any, info: ValidationInfo) -> Union[int, float]:
        # bool is an int subclass but never a valid size or duration
        if (
            isinstance(value, bool)
            or not isinstance(value, (int, float))
            or (isinstance(value, float) and not math.isfinite(value))
            or value < 0
        ):
            raise ValueError(f"{info.field_name} option must be a positive number")
        return value

    @field_validator(*_LIST_FIELDS, mode="before")
    @classmethod
    def _normalize_matchers(cls, value: Any, info: ValidationInfo) -> tuple[UrlMatcher, ...]:
        message = f"{info.field_name} option must be a list of strings or regexes"
        if not isinstance(value, (list, tuple)):
            raise ValueError(message)

        matchers: list[UrlMatcher] = []
        for entry in value:
            if isinstance(entry, re.Pattern):
                matchers.append(entry)
            elif isinstance(entry, str):
                matchers.append(entry.lower())
            else:
                raise ValueError(message)
        return tuple(matchers)

    @model_validator(mode="after")
    def _freeze_extras(self) -> "NickOptions":
        extra = self.__pydantic_extra__
        if extra:
            for key, value in extra.items():
                extra[key] = _freeze(value)
        return self

    def as_dict(self) -> dict[str, Any]:
        """
        Return the options as a raw camelCase mapping.

        The result can be fed back to normalize_options() and yields an
        equal model. ``loadImages`` is omitted when unset.
        """
        data: dict[str, Any] = {}
        for name, field in type(self).model_fields.items():
            value = getattr(self, name)
            if name == "load_images" and value is None:
                continue
            if isinstance(value, tuple):
                value = list(value)
            data[field.alias or name] = value
        if self.model_extra:
            data.update(copy.deepcopy(_thaw(self.model_extra)))
        return data

    @classmethod
    def from_env(cls) -> "NickOptions":
        """Create NickOptions from NICK_* environment variables."""
        return normalize_options(options_from_env())


def _freeze(value: Any) -> Any:
    """Recursively swap mutable containers for read-only equivalents."""
    if isinstance(value, Mapping):
        return MappingProxyType({key: _freeze(item) for key, item in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(_freeze(item) for item in value)
    if isinstance(value, (set, frozenset)):
        return frozenset(value)
    return value


def _thaw(value: Any) -> Any:
    """Inverse of _freeze, producing plain dicts, lists and sets."""
    if isinstance(value, Mapping):
        return {key: _thaw(item) for key, item in value.items()}
    if isinstance(value, tuple):
        return [_thaw(item) for item in value]
    if isinstance(value, frozenset):
        return set(value)
    return value


def _raw_key(field_name: Optional[str]) -> str:
    """Map an attribute name back to the raw option key callers use."""
    if field_name is None:
        return "options"
    field = NickOptions.model_fields.get(field_name)
    if field is not None and field.alias:
        return field.alias
    return field_name


def _to_invalid_configuration(exc: ValidationError) -> InvalidConfiguration:
    error = exc.errors()[0]
    loc = error.get("loc") or ()
    field = str(loc[0]) if loc else None
    if field in NickOptions.model_fields:
        field = _raw_key(field)

    cause = (error.get("ctx") or {}).get("error")
    if isinstance(cause, ValueError):
        message = str(cause)
    else:
        message = f"{field or 'options'} option is invalid: {error.get('msg')}"
    return InvalidConfiguration(message, field=field)


def normalize_options(raw: Any = None) -> NickOptions:
    """
    Validate a raw options mapping and fill in defaults.

    Args:
        raw: Mapping of option names to values, an existing NickOptions,
            or None for all defaults

    Returns:
        Frozen NickOptions independent of the caller's object

    Raises:
        InvalidConfiguration: If raw is not a mapping or any option has
            the wrong type or a negative value

    Example:
        >>> options = normalize_options({"timeout": 5000, "whitelist": ["Example.COM"]})
        >>> options.whitelist
        ('example.com',)
    """
    if raw is None:
        raw = {}
    elif isinstance(raw, NickOptions):
        raw = raw.as_dict()

    if not isinstance(raw, Mapping):
        raise InvalidConfiguration("options must be a mapping of option names to values")

    data = copy.deepcopy(dict(raw))
    try:
        return NickOptions.model_validate(data)
    except ValidationError as exc:
        raise _to_invalid_configuration(exc) from exc
