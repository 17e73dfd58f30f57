import pytest

from todolist.models import Todo
from todolist.schemas import TodoOut

STORED = [
    Todo(id=1, title="buy milk", completed=False, order=1, url="http://localhost/todos/1"),
    Todo(id=7, title=None, completed=None, order=None, url=None),
    Todo(id=42, title="done", completed=True, order=3, url="todo/ex"),
]


class TestMerge:
    @pytest.mark.parametrize("existing", STORED)
    def test_empty_patch_is_identity(self, existing):
        assert existing.merge(Todo()) == existing

    @pytest.mark.parametrize("existing", STORED)
    def test_patch_never_changes_id(self, existing):
        assert existing.merge(Todo(id=999, title="other")).id == existing.id

    def test_title_and_completed_taken_from_patch(self):
        existing = STORED[0]
        merged = existing.merge(Todo(title="buy oat milk", completed=True))
        assert merged.title == "buy oat milk"
        assert merged.completed is True
        assert merged.url == existing.url

    def test_completed_false_in_patch_overrides(self):
        merged = STORED[2].merge(Todo(completed=False))
        assert merged.completed is False
        assert merged.title == "done"

    def test_order_and_url_kept_from_existing(self):
        existing = STORED[0]
        merged = existing.merge(Todo(order=10, url="elsewhere"))
        assert merged.order == 1
        assert merged.url == existing.url

    def test_merge_is_pure(self):
        existing = STORED[0]
        existing.merge(Todo(title="changed"))
        assert existing.title == "buy milk"


class TestSerialization:
    def test_from_dict_ignores_unknown_keys(self):
        todo = Todo.from_dict({"id": 3, "title": "x", "priority": "high"})
        assert todo == Todo(id=3, title="x")

    def test_from_dict_missing_id_is_unassigned(self):
        assert Todo.from_dict({"title": "x"}).id == 0
        assert Todo.from_dict({"id": None}).id == 0

    def test_to_dict_has_every_field(self):
        assert Todo(id=1).to_dict() == {
            "id": 1,
            "title": None,
            "completed": None,
            "order": None,
            "url": None,
        }

    def test_is_completed_defaults_to_false(self):
        assert Todo(id=1).is_completed is False
        assert Todo(id=1, completed=True).is_completed is True

    def test_equality_is_structural(self):
        assert Todo(id=1, title="a") == Todo(id=1, title="a")
        assert Todo(id=1, title="a") != Todo(id=1, title="a", order=2)


class TestTodoOut:
    def test_unset_completed_reported_false(self):
        out = TodoOut.from_todo(Todo(id=2, title="x"))
        assert out.completed is False
        assert out.id == 2

    def test_completed_kept(self):
        assert TodoOut.from_todo(Todo(id=2, completed=True)).completed is True
