r"""Request description and assembly.

This package turns a declarative ``RequestSpec`` into ``httpx.Request``
objects: path template expansion, query and header merging, body
encoding and basic authentication.
"""

from __future__ import annotations

__all__ = [
    "BasicAuth",
    "FormBody",
    "HeaderMergeMode",
    "JsonBody",
    "PlainBody",
    "RequestBody",
    "RequestSpec",
    "XmlBody",
    "assemble",
    "build_url",
    "encode_query",
    "expand_template",
    "merge_headers",
    "merge_query",
]

from recast.request.assembler import assemble, build_url
from recast.request.auth import BasicAuth
from recast.request.body import FormBody, JsonBody, PlainBody, RequestBody, XmlBody
from recast.request.headers import HeaderMergeMode, merge_headers
from recast.request.query import encode_query, merge_query
from recast.request.spec import RequestSpec
from recast.request.template import expand_template
