"""
Request option normalization.

Plugins written against the older request interface still pass `uri`, `jar`,
`encoding=None` and `json=True`. Everything is converted here so the executor
only ever sees `RequestOptions`.

Mappings and `LegacyRequestOptions` carry `timeout` in milliseconds, as the
plugins always did; it is converted to the seconds httpx expects.
`RequestOptions.timeout` is already in seconds and is left alone.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Union

from ...models.request_models import LegacyRequestOptions, RequestOptions, ResponseType

logger = logging.getLogger("BiliveTools.Requests.Normalizer")

AnyRequestOptions = Union[RequestOptions, LegacyRequestOptions, Mapping[str, Any]]

# 两种形状共有的字段，原样带过去
_SHARED_FIELDS = ("method", "headers", "body", "form", "search_params")


def normalize_options(options: AnyRequestOptions) -> RequestOptions:
    """
    Convert any accepted options shape into the canonical `RequestOptions`.

    The input is never mutated. Raises pydantic.ValidationError when neither
    `url` nor `uri` is given or a field has the wrong type; the executor reports
    that as an `options` failure instead of raising.
    """
    if isinstance(options, RequestOptions):
        return options.model_copy()
    if not isinstance(options, LegacyRequestOptions):
        options = LegacyRequestOptions.model_validate(dict(options))
    return _from_legacy(options)


def _from_legacy(legacy: LegacyRequestOptions) -> RequestOptions:
    fields: Dict[str, Any] = {name: getattr(legacy, name) for name in _SHARED_FIELDS}

    # 为了兼容已有插件: 新字段优先，旧字段只在新字段缺失时使用
    fields["url"] = legacy.url if legacy.url is not None else legacy.uri
    fields["cookie_jar"] = legacy.cookie_jar if legacy.cookie_jar is not None else legacy.jar
    fields["timeout"] = legacy.timeout / 1000 if legacy.timeout is not None else None

    response_type = legacy.response_type or ResponseType.TEXT
    if "encoding" in legacy.model_fields_set and legacy.encoding is None:
        response_type = ResponseType.BUFFER
    else:
        fields["encoding"] = legacy.encoding

    marker = legacy.json_field
    if marker is True:
        response_type = ResponseType.JSON
    elif marker is not None and marker is not False:
        fields["json_body"] = marker
    fields["response_type"] = response_type

    extra = dict(legacy.model_extra or {})
    if extra:
        logger.debug(f"Passing through extra request options: {sorted(extra)}")
    return RequestOptions(**fields, **extra)
