import json

import pytest
from pydantic import ValidationError

from todolist.models import Task
from todolist.transfer import decode_task, encode_task, task_from_bundle, task_to_bundle


def test_json_round_trip_preserves_value():
    task = Task(name="Buy milk", important=True, completed=False, created=1_700_000_000_000, id=7)
    assert decode_task(encode_task(task)) == task


def test_dict_round_trip_of_unsaved_task():
    task = Task(name="Walk dog", created=123)
    assert task_from_bundle(task_to_bundle(task)) == task


def test_bundle_carries_exactly_the_stored_fields():
    bundle = json.loads(encode_task(Task(name="Buy milk", created=1, id=2)))
    assert bundle == {"name": "Buy milk", "important": False, "completed": False, "created": 1, "id": 2}


def test_decode_rejects_missing_field():
    with pytest.raises(ValidationError):
        decode_task(b'{"name": "Buy milk", "important": false, "completed": false, "id": 1}')


def test_decode_rejects_null_name():
    with pytest.raises(ValidationError):
        decode_task('{"name": null, "important": false, "completed": false, "created": 1, "id": 1}')


def test_bundle_rejects_unknown_keys():
    bundle = task_to_bundle(Task(name="Buy milk", created=1))
    bundle["created_date_formatted"] = "yesterday"
    with pytest.raises(ValidationError):
        task_from_bundle(bundle)


@pytest.mark.parametrize(
    "created,task_id",
    [(2**63, 0), (-(2**63) - 1, 0), (2**70, 0), (1, 2**63), (1, -1)],
)
def test_decode_rejects_values_outside_storage_range(created, task_id):
    payload = json.dumps(
        {"name": "Buy milk", "important": False, "completed": False, "created": created, "id": task_id}
    )
    with pytest.raises(ValidationError):
        decode_task(payload)


def test_decode_accepts_storage_range_limits():
    task = Task(name="Buy milk", created=-(2**63), id=2**63 - 1)
    assert decode_task(encode_task(task)) == task
