import dataclasses
import os
import time
from datetime import timezone

import pytest

from todolist.models import Task, system_clock


class TestDefaults:
    def test_only_name_supplied(self):
        before = system_clock()
        task = Task(name="Buy milk")
        after = system_clock()
        assert task.important is False
        assert task.completed is False
        assert task.id == 0
        assert before <= task.created <= after
        assert not task.is_persisted

    def test_created_is_close_to_wall_clock(self):
        task = Task(name="Buy milk")
        assert abs(task.created - int(time.time() * 1000)) < 5_000

    def test_new_reads_injected_clock(self):
        task = Task.new("Buy milk", important=True, clock=lambda: 42)
        assert task == Task(name="Buy milk", important=True, completed=False, created=42, id=0)

    def test_empty_name_is_not_rejected(self):
        assert Task(name="", created=1).name == ""


class TestEquality:
    base = dict(name="Buy milk", important=False, completed=False, created=1000, id=3)

    def test_equal_when_all_fields_match(self):
        assert Task(**self.base) == Task(**self.base)
        assert hash(Task(**self.base)) == hash(Task(**self.base))

    @pytest.mark.parametrize(
        "field,value",
        [("name", "Buy bread"), ("important", True), ("completed", True), ("created", 1001), ("id", 4)],
    )
    def test_any_field_change_breaks_equality(self, field, value):
        other = Task(**{**self.base, field: value})
        assert Task(**self.base) != other

    def test_example_values_differ_in_important_and_id(self):
        plain = Task(name="Buy milk", created=500)
        flagged = Task(name="Buy milk", important=True, id=7, created=500)
        assert plain != flagged
        differing = [
            f.name for f in dataclasses.fields(Task) if getattr(plain, f.name) != getattr(flagged, f.name)
        ]
        assert differing == ["important", "id"]

    def test_formatted_date_is_not_a_field(self):
        names = {f.name for f in dataclasses.fields(Task)}
        assert names == {"name", "important", "completed", "created", "id"}
        assert "created_date_formatted" not in dataclasses.asdict(Task(name="x", created=1))


class TestFormattedDate:
    def test_reads_are_stable(self):
        task = Task(name="Buy milk", created=1_700_000_000_000)
        assert task.created_date_formatted == task.created_date_formatted
        assert task.created_date_formatted

    def test_pinned_timezone_and_format(self):
        task = Task(name="Buy milk", created=1_700_000_000_000)
        assert task.format_created(timezone.utc, "%Y-%m-%d %H:%M:%S") == "2023-11-14 22:13:20"


class TestImmutability:
    def test_fields_cannot_be_assigned(self):
        task = Task(name="Buy milk")
        with pytest.raises(dataclasses.FrozenInstanceError):
            task.completed = True  # type: ignore[misc]

    def test_with_changes_returns_new_value_with_same_id(self):
        task = Task(name="Buy milk", created=10, id=5)
        done = task.with_changes(completed=True)
        assert done is not task
        assert task.completed is False
        assert done == Task(name="Buy milk", completed=True, created=10, id=5)

    @pytest.mark.parametrize("locked", ["id", "created"])
    def test_with_changes_rejects_identity_changes(self, locked):
        task = Task(name="Buy milk", created=10, id=5)
        with pytest.raises(ValueError):
            task.with_changes(**{locked: 99})


class TestFormattedDateRange:
    @pytest.mark.parametrize("created", [10**16, 2**63 - 1, -(2**63), -62_135_596_800_000])
    def test_extreme_values_still_format(self, created):
        task = Task(name="x", created=created)
        assert task.created_date_formatted
        assert task.format_created(timezone.utc, "%Y")

    def test_values_past_the_calendar_clamp_to_its_ends(self):
        assert Task(name="x", created=2**63 - 1).format_created(timezone.utc, "%Y-%m-%d") == "9999-12-30"
        low = Task(name="x", created=-(2**63))
        assert low.format_created(timezone.utc, "%m-%d %H:%M") == "01-02 00:00"
        assert low.format_created(timezone.utc) == Task(name="y", created=-(2**62)).format_created(timezone.utc)


@pytest.fixture()
def local_tz():
    """Switch the process timezone; restores TZ afterwards."""
    if not hasattr(time, "tzset"):
        pytest.skip("time.tzset is not available on this platform")
    saved = os.environ.get("TZ")

    def set_tz(name):
        os.environ["TZ"] = name
        time.tzset()

    yield set_tz
    if saved is None:
        os.environ.pop("TZ", None)
    else:
        os.environ["TZ"] = saved
    time.tzset()


class TestAmbientTimezone:
    def test_timezone_change_alters_rendering_but_not_equality(self, local_tz):
        a = Task(name="Buy milk", created=1_700_000_000_000, id=1)
        b = Task(name="Buy milk", created=1_700_000_000_000, id=1)

        local_tz("UTC0")
        in_utc = a.created_date_formatted
        local_tz("JST-9")
        in_tokyo = a.created_date_formatted

        assert in_utc != in_tokyo
        assert b.created_date_formatted == in_tokyo
        assert a == b
        assert hash(a) == hash(b)

    def test_clock_is_not_consulted_after_construction(self):
        ticks = iter([1_000, 2_000])
        task = Task.new("Buy milk", clock=lambda: next(ticks))
        first = task.created_date_formatted
        assert task.created_date_formatted == first
        assert task == Task(name="Buy milk", created=1_000)
