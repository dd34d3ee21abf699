from __future__ import annotations

import io
from collections.abc import Callable, Iterable
from typing import Any
from urllib.parse import parse_qs

from werkzeug.formparser import parse_form_data


class MethodOverrideMiddleware:
    """
    Lets HTML forms issue PUT, PATCH and DELETE.

    A POST carrying ``_method`` in its urlencoded or multipart body or in the
    query string, or an ``X-HTTP-Method-Override`` header, is rewritten to that
    method before Flask routes it. The body is buffered and put back so form
    parsing still works. Bodies over ``max_content_length`` are left unread and
    stay a POST, so Flask still answers them with 413.
    """

    allowed_methods = frozenset({"PUT", "PATCH", "DELETE"})

    def __init__(
        self,
        app: Callable[..., Iterable[bytes]],
        input_name: str = "_method",
        max_content_length: int | None = None,
    ) -> None:
        self.app = app
        self.input_name = input_name
        self.max_content_length = max_content_length

    def __call__(self, environ: dict[str, Any], start_response: Callable[..., Any]) -> Iterable[bytes]:
        if environ.get("REQUEST_METHOD", "").upper() == "POST":
            method = self._override_method(environ)
            if method in self.allowed_methods:
                environ["REQUEST_METHOD"] = method
        return self.app(environ, start_response)

    def _override_method(self, environ: dict[str, Any]) -> str:
        header = environ.get("HTTP_X_HTTP_METHOD_OVERRIDE")
        if header:
            return header.strip().upper()

        query = parse_qs(environ.get("QUERY_STRING", ""))
        if self.input_name in query:
            return query[self.input_name][0].strip().upper()

        content_type = environ.get("CONTENT_TYPE", "")
        is_urlencoded = content_type.startswith("application/x-www-form-urlencoded")
        is_multipart = content_type.startswith("multipart/form-data")
        if not (is_urlencoded or is_multipart):
            return ""
        try:
            length = int(environ.get("CONTENT_LENGTH") or 0)
        except ValueError:
            return ""
        if length <= 0:
            return ""
        if self.max_content_length is not None and length > self.max_content_length:
            return ""

        body = environ["wsgi.input"].read(length)
        environ["wsgi.input"] = io.BytesIO(body)

        if is_urlencoded:
            values = parse_qs(body.decode("latin-1"))
            return (values.get(self.input_name) or [""])[0].strip().upper()

        # Parse a copy so the request keeps its own unread stream.
        _, form, _ = parse_form_data(dict(environ, **{"wsgi.input": io.BytesIO(body)}))
        return (form.get(self.input_name) or "").strip().upper()
