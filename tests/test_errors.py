import pytest

from app.core.errors import (
    BucketNotFoundError,
    BucketReadError,
    FetchCancelledError,
    GridError,
    StructuralDecodeError,
    TransportError,
)


def test_structural_error_message():
    error = StructuralDecodeError("Statement[0].Action", "expected string or list of strings, got object")
    assert str(error) == "Statement[0].Action: expected string or list of strings, got object"
    assert isinstance(error, GridError)
    assert isinstance(error, ValueError)


def test_transport_error_keeps_status_code():
    error = TransportError(status_code=404, detail="missing", expected=200)
    assert error.status_code == 404
    assert "expected: 200" in str(error)


def test_bucket_read_error_contains_each_kind():
    error = BucketReadError("photos", [BucketNotFoundError("photos"), TransportError(500, "boom", expected=200)])

    assert error.bucket == "photos"
    assert error.contains(BucketNotFoundError)
    assert error.contains(TransportError)
    assert error.contains(GridError)
    assert not error.contains(FetchCancelledError)
    assert "photos" in str(error)


def test_bucket_read_error_split_keeps_type():
    error = BucketReadError("photos", [BucketNotFoundError("photos"), FetchCancelledError("region", "photos")])

    missing, rest = error.split(BucketNotFoundError)

    assert isinstance(missing, BucketReadError)
    assert isinstance(rest, BucketReadError)
    assert missing.bucket == rest.bucket == "photos"
    assert isinstance(rest.exceptions[0], FetchCancelledError)


def test_bucket_read_error_with_except_star():
    handled = []
    with pytest.raises(BucketReadError) as info:
        try:
            raise BucketReadError("photos", [BucketNotFoundError("photos"), TransportError(502, "down")])
        except* BucketNotFoundError as group:
            handled.extend(group.exceptions)

    assert len(handled) == 1
    assert len(info.value.exceptions) == 1
    assert isinstance(info.value.exceptions[0], TransportError)
