import pytest

from setlist.errors import TrackValidationError
from setlist.validators import validate_track_batch, validate_track_update


def test_single_track_payload():
    tracks = validate_track_batch({"track": {"trackName": " Green ", "key": "G", "bpm": 145}})
    assert tracks == [
        {"setPosition": None, "trackName": "Green", "timeSignature": None, "bpm": 145, "key": "G"}
    ]


def test_batch_reports_first_missing_field_across_all_tracks():
    payload = {"tracks": [
        {"trackName": "A", "key": "C", "bpm": 100},
        {"trackName": "B", "bpm": 100},
        {"key": "D", "bpm": 100},
    ]}
    with pytest.raises(TrackValidationError) as exc:
        validate_track_batch(payload)
    assert exc.value.status_code == 400
    assert exc.value.detail == "Must specify a value for trackName"


@pytest.mark.parametrize("payload", [
    {"tracks": []},
    {"tracks": "nope"},
    {"tracks": [None]},
    {"nothing": True},
])
def test_malformed_batches(payload):
    with pytest.raises(TrackValidationError):
        validate_track_batch(payload)


def test_non_positive_bpm():
    with pytest.raises(TrackValidationError) as exc:
        validate_track_batch({"track": {"trackName": "A", "key": "C", "bpm": -4}})
    assert "bpm" in exc.value.detail


def test_update_accepts_wrapped_or_flat_body():
    assert validate_track_update("abc", {"track": {"id": "abc", "key": "E"}}) == {"key": "E"}
    assert validate_track_update("abc", {"bpm": 80, "trackName": "X"}) == {"bpm": 80, "trackName": "X"}


def test_update_ignores_non_editable_fields():
    assert validate_track_update("abc", {"key": "E", "setPosition": 3, "timeSignature": "4/4"}) == {"key": "E"}


def test_update_id_mismatch_checks_underscore_id_too():
    with pytest.raises(TrackValidationError) as exc:
        validate_track_update("abc", {"track": {"_id": "xyz", "key": "E"}})
    assert exc.value.detail == "Request path id (abc) and request body id (xyz) must match."


def test_update_blank_name_rejected():
    with pytest.raises(TrackValidationError):
        validate_track_update("abc", {"trackName": "   "})
