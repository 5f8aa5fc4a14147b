# Copyright 2026-present Kensho Technologies, LLC.
class IntrospectionSorterError(Exception):
    """Generic error when processing a GraphQL introspection payload."""


class IntrospectionDecodeError(IntrospectionSorterError):
    """Exception raised when a payload could not be read as an introspection response.

    This could be due to many reasons, such as:
    - the payload is not valid JSON, or its top-level value is not a JSON object;
    - a known key holds a value of the wrong JSON type, e.g. "fields" holding a string;
    - a required key is missing, e.g. a field without a "type";
    - a "kind" or directive location is not a token known to GraphQL introspection.
    """


class IntrospectionEncodeError(IntrospectionSorterError):
    """Exception raised when an introspection response cannot be serialized to JSON.

    Responses produced by the decoder can always be serialized. Responses built or modified by hand
    may not be, e.g. if opaque values such as "extensions" carry a float NaN or a Python object.
    """
