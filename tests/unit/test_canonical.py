import io
import warnings
from collections.abc import Iterator

import pytest
from aws_sdk_presigner import URI, AWSRequest, Field, Fields
from aws_sdk_presigner.canonical import (
    EMPTY_SHA256_HASH,
    canonical_headers,
    canonical_path,
    canonical_query_string,
    canonical_request,
    payload_hash,
    signed_headers,
)
from aws_sdk_presigner.exceptions import AWSSDKWarning


@pytest.mark.parametrize(
    "path,uri_encode_path,expected",
    [
        ("/", True, "/"),
        (None, True, "/"),
        ("", False, "/"),
        ("/foo/bar", True, "/foo/bar"),
        ("foo", True, "/foo"),
        ("a%20b", True, "/a%2520b"),
        ("/a%20b", True, "/a%2520b"),
        ("/a%20b", False, "/a%20b"),
        ("/~user/file.txt", True, "/~user/file.txt"),
    ],
)
def test_canonical_path(path: str | None, uri_encode_path: bool, expected: str) -> None:
    assert canonical_path(path, uri_encode_path=uri_encode_path) == expected


def test_canonical_query_string_sorts_by_encoded_key_then_value() -> None:
    params = {"b": ["2", "1"], "a": ["z"], "A": ["x"], "a b": ["/"]}
    assert canonical_query_string(params) == "A=x&a=z&a%20b=%2F&b=1&b=2"


@pytest.mark.parametrize(
    "params",
    [
        {},
        {"Action": ["connect"], "DBUser": ["user"]},
        {"z": ["1"], "y": ["b", "a", "c"], "X-Amz-Date": ["20150830T123600Z"]},
        {"key with space": ["v/1", "v 2"], "key~": [""], "kéy": ["é"]},
    ],
)
def test_canonical_query_string_ordering_is_idempotent(
    params: dict[str, list[str]],
) -> None:
    result = canonical_query_string(params)
    pairs = [tuple(part.split("=", 1)) for part in result.split("&")] if result else []
    assert pairs == sorted(pairs)
    assert len(pairs) == sum(len(values) for values in params.values())


def test_canonical_query_string_empty() -> None:
    assert canonical_query_string({}) == ""


def test_canonical_headers_are_lowercased_sorted_and_comma_joined() -> None:
    fields = Fields(
        [
            Field(name="X-Amz-Meta", values=["a", "b"]),
            Field(name="Host", values=["db.example.com:5432"]),
        ]
    )
    assert canonical_headers(fields) == (
        "host:db.example.com:5432\nx-amz-meta:a,b\n"
    )
    assert signed_headers(fields) == "host;x-amz-meta"


def test_header_canonicalization_ignores_case_and_order() -> None:
    first = Fields(
        [
            Field(name="Host", values=["example.com"]),
            Field(name="X-Amz-Foo", values=["bar"]),
            Field(name="content-type", values=["text/plain"]),
        ]
    )
    second = Fields(
        [
            Field(name="x-amz-foo", values=["bar"]),
            Field(name="CONTENT-TYPE", values=["text/plain"]),
            Field(name="HOST", values=["example.com"]),
        ]
    )
    assert canonical_headers(first) == canonical_headers(second)
    assert signed_headers(first) == signed_headers(second)
    assert signed_headers(first) == "content-type;host;x-amz-foo"


def test_header_values_are_not_trimmed() -> None:
    fields = Fields([Field(name="X-Spaced", values=[" a  b "])])
    assert canonical_headers(fields) == "x-spaced: a  b \n"


def test_empty_headers() -> None:
    assert canonical_headers(Fields()) == ""
    assert signed_headers(Fields()) == ""


def test_canonical_request_layout() -> None:
    result = canonical_request(
        method="GET",
        path="/",
        query="Action=ListUsers&Version=2010-05-08",
        headers="host:iam.amazonaws.com\n",
        signed="host",
        payload_hash=EMPTY_SHA256_HASH,
    )
    assert result == (
        "GET\n"
        "/\n"
        "Action=ListUsers&Version=2010-05-08\n"
        "host:iam.amazonaws.com\n"
        "\n"
        "host\n"
        f"{EMPTY_SHA256_HASH}"
    )
    assert not result.endswith("\n")


def _request(body: bytes | io.BytesIO | Iterator[bytes] | None) -> AWSRequest:
    return AWSRequest(destination=URI(host="example.com"), method="PUT", body=body)


@pytest.mark.parametrize("body", [None, b""])
def test_payload_hash_of_empty_body(body: bytes | None) -> None:
    assert payload_hash(_request(body)) == EMPTY_SHA256_HASH


def test_payload_hash_restores_seekable_position() -> None:
    body = io.BytesIO(b"skip-123456")
    body.seek(5)
    request = _request(body)
    assert payload_hash(request) == payload_hash(_request(b"123456"))
    assert body.tell() == 5
    assert request.body is body


def test_payload_hash_buffers_one_shot_iterables() -> None:
    request = _request(iter([b"123", b"456"]))
    with pytest.warns(AWSSDKWarning):
        checksum = payload_hash(request)
    assert checksum == payload_hash(_request(b"123456"))
    assert isinstance(request.body, io.BytesIO)
    assert request.body.read() == b"123456"


def test_payload_hash_of_bytes_does_not_warn() -> None:
    with warnings.catch_warnings():
        warnings.simplefilter("error")
        payload_hash(_request(b"payload"))
