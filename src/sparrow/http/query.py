"""URL-encoded decoding shared by query strings and form bodies."""

from urllib.parse import parse_qsl

# A decoded query string or form body: repeated keys collect into a list.
QueryDict = dict[str, str | list[str]]


def parse_urlencoded(text: str) -> QueryDict:
    """Decode ``application/x-www-form-urlencoded`` text.

    A key seen once maps to its string value; a repeated key maps to the
    list of its values in order. Blank values are kept and ``+`` decodes
    to a space. Never raises; an empty string yields ``{}``::

        parse_urlencoded("a=1&b=2")      -> {"a": "1", "b": "2"}
        parse_urlencoded("tag=x&tag=y")  -> {"tag": ["x", "y"]}
        parse_urlencoded("flag")         -> {"flag": ""}
    """
    result: QueryDict = {}
    for key, value in parse_qsl(text, keep_blank_values=True):
        existing = result.get(key)
        if existing is None:
            result[key] = value
        elif isinstance(existing, list):
            existing.append(value)
        else:
            result[key] = [existing, value]
    return result
