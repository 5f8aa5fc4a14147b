# Copyright 2026-present Kensho Technologies, LLC.
import json
import unittest

from graphql import DirectiveLocation, TypeKind

from .. import sort_introspection_payload
from ..codec import (
    decode_introspection_response,
    encode_introspection_response,
    introspection_response_from_dict,
    introspection_response_to_dict,
)
from ..exceptions import IntrospectionDecodeError, IntrospectionEncodeError
from ..model import ABSENT, IntrospectionResponse, IntrospectionType, RootOperationType
from .test_helpers import get_element_by_name, get_introspection_payload, to_json_bytes


def _make_single_type_payload(type_payload):
    """Wrap the JSON object of a single type into a complete introspection response."""
    return {"data": {"__schema": {"queryType": {"name": "Query"}, "types": [type_payload]}}}


_TRACING_EXTENSION = {
    "tracing": {
        "version": 1,
        "startTime": "2026-10-19T09:00:00.000Z",
        "endTime": "2026-10-19T09:00:00.015Z",
        "duration": 15023000,
        "execution": {
            "resolvers": [
                {"path": ["__schema", "types"], "startOffset": 30, "duration": 1200},
                {"path": ["__schema", "directives"], "startOffset": 10, "duration": 800},
            ]
        },
    }
}


class CodecRoundTripTests(unittest.TestCase):
    def test_graphql_core_payload_round_trips(self) -> None:
        payload = get_introspection_payload()
        response = introspection_response_from_dict(payload)
        self.assertEqual(payload, introspection_response_to_dict(response))

    def test_absent_deprecation_reason_stays_absent(self) -> None:
        payload = _make_single_type_payload(
            {
                "kind": "OBJECT",
                "name": "Query",
                "fields": [
                    {
                        "name": "user",
                        "args": [],
                        "type": {"kind": "OBJECT", "name": "User", "ofType": None},
                        "isDeprecated": False,
                    },
                    {
                        "name": "legacyUser",
                        "args": [],
                        "type": {"kind": "OBJECT", "name": "User", "ofType": None},
                        "isDeprecated": False,
                        "deprecationReason": None,
                    },
                ],
            }
        )
        canonical_payload = json.loads(sort_introspection_payload(to_json_bytes(payload)))
        fields = canonical_payload["data"]["__schema"]["types"][0]["fields"]

        user_field = get_element_by_name(fields, "user")
        self.assertNotIn("deprecationReason", user_field)
        self.assertNotIn("description", user_field)

        legacy_user_field = get_element_by_name(fields, "legacyUser")
        self.assertIn("deprecationReason", legacy_user_field)
        self.assertIsNone(legacy_user_field["deprecationReason"])

    def test_absent_and_null_are_distinguished_in_the_model(self) -> None:
        response = introspection_response_from_dict(
            _make_single_type_payload({"kind": "SCALAR", "name": "Date", "fields": None})
        )
        date_type = response.data.schema.types[0]
        self.assertIsNone(date_type.fields)
        self.assertIs(ABSENT, date_type.description)
        self.assertIs(ABSENT, date_type.of_type)
        self.assertIs(ABSENT, response.errors)
        self.assertIs(ABSENT, response.extensions)
        self.assertIs(ABSENT, response.data.service)

    def test_enums_are_decoded(self) -> None:
        payload = {
            "data": {
                "__schema": {
                    "types": [{"kind": "NON_NULL", "ofType": {"kind": "SCALAR", "name": "ID"}}],
                    "directives": [{"name": "skip", "locations": ["FIELD", "INLINE_FRAGMENT"]}],
                }
            }
        }
        schema = introspection_response_from_dict(payload).data.schema

        self.assertEqual(TypeKind.NON_NULL, schema.types[0].kind)
        self.assertEqual(
            [DirectiveLocation.FIELD, DirectiveLocation.INLINE_FRAGMENT],
            schema.directives[0].locations,
        )
        response = introspection_response_from_dict(payload)
        self.assertEqual(payload, introspection_response_to_dict(response))

    def test_unknown_keys_are_preserved(self) -> None:
        payload = {
            "data": {
                "__schema": {
                    "description": "The test schema.",
                    "types": [
                        {
                            "kind": "SCALAR",
                            "name": "Date",
                            "specifiedByURL": "https://tools.ietf.org/html/rfc3339",
                        }
                    ],
                    "directives": [
                        {
                            "name": "tag",
                            "isRepeatable": True,
                            "locations": ["OBJECT"],
                            "args": [
                                {
                                    "name": "name",
                                    "type": {"kind": "SCALAR", "name": "String"},
                                    "isDeprecated": False,
                                    "deprecationReason": None,
                                }
                            ],
                        }
                    ],
                },
                "viewer": {"id": "1"},
            },
            "hasNext": False,
        }
        response = introspection_response_from_dict(payload)
        self.assertEqual({"hasNext": False}, response.extras)
        self.assertEqual({"viewer": {"id": "1"}}, response.data.extras)
        self.assertEqual({"description": "The test schema."}, response.data.schema.extras)
        self.assertEqual(
            {"specifiedByURL": "https://tools.ietf.org/html/rfc3339"},
            response.data.schema.types[0].extras,
        )
        self.assertEqual({"isRepeatable": True}, response.data.schema.directives[0].extras)
        self.assertEqual(payload, introspection_response_to_dict(response))

    def test_extensions_are_untouched(self) -> None:
        payload = get_introspection_payload({"extensions": _TRACING_EXTENSION})
        canonical_bytes = sort_introspection_payload(to_json_bytes(payload))

        self.assertEqual(_TRACING_EXTENSION, json.loads(canonical_bytes)["extensions"])
        tracing_bytes = json.dumps(
            _TRACING_EXTENSION["tracing"], ensure_ascii=False, separators=(",", ":")
        ).encode("utf-8")
        self.assertIn(b'"tracing":' + tracing_bytes, canonical_bytes)

    def test_service_descriptor_round_trips(self) -> None:
        payload = {"data": {"_service": {"sdl": "type Query { ping: String }"}}}
        response = decode_introspection_response(to_json_bytes(payload))
        self.assertEqual("type Query { ping: String }", response.data.service.sdl)
        self.assertIs(ABSENT, response.data.schema)
        self.assertEqual(payload, json.loads(encode_introspection_response(response)))

    def test_error_only_response_round_trips(self) -> None:
        payload = {"errors": [{"message": "Introspection is disabled."}], "data": None}
        response = decode_introspection_response(to_json_bytes(payload))
        self.assertIsNone(response.data)
        self.assertEqual(payload, json.loads(encode_introspection_response(response)))


class CodecEncodingTests(unittest.TestCase):
    def test_compact_output(self) -> None:
        response = introspection_response_from_dict(
            _make_single_type_payload({"name": "Date", "kind": "SCALAR", "description": "Día"})
        )
        self.assertEqual(
            '{"data":{"__schema":{"queryType":{"name":"Query"},'
            '"types":[{"kind":"SCALAR","name":"Date","description":"Día"}]}}}'.encode("utf-8"),
            encode_introspection_response(response),
        )

    def test_indented_output(self) -> None:
        payload = get_introspection_payload()
        response = introspection_response_from_dict(payload)
        indented_bytes = encode_introspection_response(response, indent=2)
        self.assertTrue(indented_bytes.startswith(b'{\n  "data": {\n    "__schema": {\n'))
        self.assertEqual(payload, json.loads(indented_bytes))

    def test_known_keys_are_written_in_a_fixed_order(self) -> None:
        payload = _make_single_type_payload(
            {
                "zExtra": 1,
                "ofType": None,
                "possibleTypes": None,
                "enumValues": None,
                "interfaces": [],
                "inputFields": None,
                "fields": [],
                "aExtra": 2,
                "description": None,
                "name": "Query",
                "kind": "OBJECT",
            }
        )
        encoded_bytes = encode_introspection_response(introspection_response_from_dict(payload))
        type_payload = json.loads(encoded_bytes)["data"]["__schema"]["types"][0]
        self.assertEqual(
            [
                "kind",
                "name",
                "description",
                "fields",
                "inputFields",
                "interfaces",
                "enumValues",
                "possibleTypes",
                "ofType",
                "aExtra",
                "zExtra",
            ],
            list(type_payload),
        )

    def test_root_operation_types_are_written_in_a_fixed_order(self) -> None:
        name_first_payload = {
            "data": {
                "__schema": {
                    "queryType": {"name": "Query", "kind": "OBJECT", "zExtra": 1, "aExtra": 2},
                    "mutationType": {"name": "Mutation", "kind": "OBJECT"},
                    "subscriptionType": None,
                }
            }
        }
        kind_first_payload = {
            "data": {
                "__schema": {
                    "subscriptionType": None,
                    "mutationType": {"kind": "OBJECT", "name": "Mutation"},
                    "queryType": {"aExtra": 2, "kind": "OBJECT", "zExtra": 1, "name": "Query"},
                }
            }
        }
        expected_bytes = (
            b'{"data":{"__schema":{"queryType":{"name":"Query","kind":"OBJECT","aExtra":2,'
            b'"zExtra":1},"mutationType":{"name":"Mutation","kind":"OBJECT"},'
            b'"subscriptionType":null}}}'
        )
        for payload in (name_first_payload, kind_first_payload):
            self.assertEqual(expected_bytes, sort_introspection_payload(to_json_bytes(payload)))

        schema = introspection_response_from_dict(kind_first_payload).data.schema
        self.assertEqual(
            RootOperationType(
                name="Query", kind=TypeKind.OBJECT, extras={"aExtra": 2, "zExtra": 1}
            ),
            schema.query_type,
        )
        self.assertIsNone(schema.subscription_type)

    def test_lone_surrogate_cannot_be_encoded(self) -> None:
        raw_payload = (
            b'{"data":{"__schema":{"types":['
            b'{"kind":"SCALAR","name":"Date","description":"\\ud800"}]}}}'
        )
        response = decode_introspection_response(raw_payload)
        self.assertEqual("\ud800", response.data.schema.types[0].description)
        with self.assertRaises(IntrospectionEncodeError):
            encode_introspection_response(response)
        with self.assertRaises(IntrospectionEncodeError):
            sort_introspection_payload(raw_payload)

    def test_unserializable_value(self) -> None:
        response = IntrospectionResponse(extensions={"cost": float("nan")})
        with self.assertRaises(IntrospectionEncodeError):
            encode_introspection_response(response)

        response = IntrospectionResponse(extensions={"tracing": object()})
        with self.assertRaises(IntrospectionEncodeError):
            encode_introspection_response(response)

    def test_wrapped_type_without_name(self) -> None:
        type_ = IntrospectionType(kind=TypeKind.LIST, of_type=None)
        response = introspection_response_from_dict(
            {"data": {"__schema": {"types": [{"kind": "LIST", "ofType": None}]}}}
        )
        self.assertEqual(type_, response.data.schema.types[0])
        self.assertEqual(
            b'{"data":{"__schema":{"types":[{"kind":"LIST","ofType":null}]}}}',
            encode_introspection_response(response),
        )


class CodecDecodingErrorTests(unittest.TestCase):
    def _assert_decode_error(self, raw_payload, expected_message_fragment: str) -> None:
        with self.assertRaises(IntrospectionDecodeError) as context:
            decode_introspection_response(raw_payload)
        self.assertIn(expected_message_fragment, str(context.exception))

    def test_invalid_json(self) -> None:
        self._assert_decode_error(b'{"data": ', "not valid JSON")
        self._assert_decode_error(b"\xff\xfe\x00garbage", "not valid JSON")

    def test_non_finite_constants_are_rejected(self) -> None:
        self._assert_decode_error(b'{"data": null, "extensions": {"cost": NaN}}', "NaN")

    def test_top_level_value_must_be_an_object(self) -> None:
        self._assert_decode_error(b"[]", "Expected a JSON object at <response>")

    def test_wrong_collection_type(self) -> None:
        raw_payload = to_json_bytes(
            _make_single_type_payload({"kind": "OBJECT", "name": "Query", "fields": "id"})
        )
        self._assert_decode_error(
            raw_payload, "Expected an array at <response>.data.__schema.types[0].fields"
        )

    def test_missing_required_key(self) -> None:
        raw_payload = to_json_bytes(
            _make_single_type_payload(
                {"kind": "OBJECT", "name": "Query", "fields": [{"name": "id", "args": []}]}
            )
        )
        self._assert_decode_error(raw_payload, 'Missing required key "type"')
        self._assert_decode_error(raw_payload, "<response>.data.__schema.types[0].fields[0]")

    def test_null_required_key(self) -> None:
        raw_payload = to_json_bytes(_make_single_type_payload({"kind": None, "name": "Query"}))
        self._assert_decode_error(raw_payload, 'Missing required key "kind"')

    def test_unknown_type_kind(self) -> None:
        raw_payload = to_json_bytes(_make_single_type_payload({"kind": "NOT_NULL", "name": None}))
        self._assert_decode_error(raw_payload, "Unknown type kind 'NOT_NULL'")

    def test_unknown_directive_location(self) -> None:
        raw_payload = to_json_bytes(
            {"data": {"__schema": {"directives": [{"name": "skip", "locations": ["NOWHERE"]}]}}}
        )
        self._assert_decode_error(
            raw_payload,
            "Unknown directive location 'NOWHERE' at <response>.data.__schema.directives[0]"
            ".locations[0]",
        )

    def test_wrong_scalar_types(self) -> None:
        raw_payload = to_json_bytes(_make_single_type_payload({"kind": "SCALAR", "name": 5}))
        self._assert_decode_error(raw_payload, "Expected a string at")

        raw_payload = to_json_bytes(
            _make_single_type_payload(
                {
                    "kind": "ENUM",
                    "name": "Direction",
                    "enumValues": [{"name": "ASC", "isDeprecated": "no"}],
                }
            )
        )
        self._assert_decode_error(
            raw_payload,
            "Expected a boolean at <response>.data.__schema.types[0].enumValues[0].isDeprecated",
        )

    def test_errors_must_be_objects(self) -> None:
        self._assert_decode_error(b'{"errors": ["oops"]}', "<response>.errors[0]")
