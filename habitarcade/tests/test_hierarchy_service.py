"""
Tests for parent/child validation of habits and tasks.
"""
import pytest

from habitarcade.services.hierarchy_service import (
    HierarchyValidator, habit_hierarchy_validator, task_hierarchy_validator,
    SELF_PARENT, PARENT_NOT_FOUND, CYCLIC_HIERARCHY, NESTED_HIERARCHY
)
from habitarcade.services.habit_service import HabitService
from habitarcade.services.task_service import TaskService
from habitarcade.schemas import HabitCreate, HabitUpdate, TaskUpdate
from habitarcade.exceptions import HierarchyValidationException, ParentNotFoundException
from habitarcade.tests.factories import make_habit, make_task


def graph_validator(parents, children=None):
    """Validator over an in-memory {id: parent_id} graph"""
    children = children or {}
    return HierarchyValidator(
        lookup_parent=lambda entity_id: parents.get(entity_id),
        exists=lambda entity_id: entity_id in parents,
        has_children=lambda entity_id: bool(children.get(entity_id)),
    )


class TestHierarchyValidator:
    """Rule order and outcomes on a plain graph"""

    def test_detach_is_always_ok(self):
        assert graph_validator({1: None}).validate(1, None).ok

    def test_self_parent(self):
        check = graph_validator({1: None}).validate(1, 1)

        assert not check.ok
        assert check.code == SELF_PARENT

    def test_missing_parent(self):
        check = graph_validator({1: None}).validate(1, 99)

        assert check.code == PARENT_NOT_FOUND

    def test_two_node_cycle(self):
        """A -> B, then B -> A is a cycle"""
        check = graph_validator({1: 2, 2: None}).validate(2, 1)

        assert check.code == CYCLIC_HIERARCHY

    def test_parent_already_a_child(self):
        """Setting C's parent to B where B's parent is A would make three levels"""
        check = graph_validator({1: None, 2: 1, 3: None}).validate(3, 2)

        assert check.code == NESTED_HIERARCHY

    def test_entity_with_children_cannot_become_child(self):
        check = graph_validator({1: None, 2: None, 3: 2}, children={2: [3]}).validate(2, 1)

        assert check.code == NESTED_HIERARCHY

    def test_root_parent_for_new_entity(self):
        assert graph_validator({1: None}).validate(None, 1).ok

    def test_ensure_valid_raises_not_found_for_missing_parent(self):
        with pytest.raises(ParentNotFoundException):
            graph_validator({1: None}).ensure_valid(1, 42)

    def test_ensure_valid_raises_validation_error(self):
        with pytest.raises(HierarchyValidationException) as exc_info:
            graph_validator({1: None}).ensure_valid(1, 1)

        assert exc_info.value.code == SELF_PARENT


class TestHabitHierarchy:
    """Validation wired into habit writes"""

    def test_update_to_self_parent_modifies_nothing(self, db_session):
        habit = make_habit(db_session, "Exercise")

        with pytest.raises(HierarchyValidationException) as exc_info:
            HabitService(db_session).update_habit(
                habit.id, HabitUpdate(name="Renamed", parent_habit_id=habit.id)
            )

        assert exc_info.value.code == SELF_PARENT
        db_session.refresh(habit)
        assert habit.name == "Exercise"
        assert habit.parent_habit_id is None

    def test_cycle_rejected(self, db_session):
        a = make_habit(db_session, "A")
        b = make_habit(db_session, "B", parent_habit_id=a.id)

        with pytest.raises(HierarchyValidationException) as exc_info:
            HabitService(db_session).update_habit(a.id, HabitUpdate(parent_habit_id=b.id))

        assert exc_info.value.code in (CYCLIC_HIERARCHY, NESTED_HIERARCHY)
        db_session.refresh(a)
        assert a.parent_habit_id is None

    def test_create_under_child_rejected(self, db_session):
        root = make_habit(db_session, "Root")
        child = make_habit(db_session, "Child", parent_habit_id=root.id)

        with pytest.raises(HierarchyValidationException) as exc_info:
            HabitService(db_session).create_habit(HabitCreate(name="Grandchild", parent_habit_id=child.id))

        assert exc_info.value.code == NESTED_HIERARCHY

    def test_deleted_parent_not_found(self, db_session):
        parent = make_habit(db_session, "Gone", is_deleted=True)

        validator = habit_hierarchy_validator(db_session)

        assert validator.validate(None, parent.id).code == PARENT_NOT_FOUND

    def test_restore_detaches_instead_of_nesting(self, db_session):
        """A moved under C while its child B was deleted; B comes back as a root"""
        a = make_habit(db_session, "A")
        b = make_habit(db_session, "B", parent_habit_id=a.id)
        c = make_habit(db_session, "C")
        service = HabitService(db_session)
        service.delete_habit(b.id)
        service.update_habit(a.id, HabitUpdate(parent_habit_id=c.id))

        restored = service.restore_habit(b.id)

        assert restored.is_deleted is False
        assert restored.parent_habit_id is None
        db_session.refresh(a)
        assert a.parent_habit_id == c.id

    def test_restore_child_under_root(self, db_session):
        root = make_habit(db_session, "Root")
        child = make_habit(db_session, "Child", parent_habit_id=root.id)
        service = HabitService(db_session)
        service.delete_habit(child.id)

        restored = service.restore_habit(child.id)

        assert restored.is_deleted is False
        assert restored.parent_habit_id == root.id

    def test_detach_clears_parent(self, db_session):
        root = make_habit(db_session, "Root")
        child = make_habit(db_session, "Child", parent_habit_id=root.id)

        updated = HabitService(db_session).update_habit(child.id, HabitUpdate(parent_habit_id=None))

        assert updated.parent_habit_id is None


class TestTaskHierarchy:
    """Validation wired into task writes"""

    def test_task_self_parent(self, db_session):
        task = make_task(db_session, "Write report")

        with pytest.raises(HierarchyValidationException) as exc_info:
            TaskService(db_session).update_task(task.id, TaskUpdate(parent_task_id=task.id))

        assert exc_info.value.code == SELF_PARENT
        db_session.refresh(task)
        assert task.parent_task_id is None

    def test_task_missing_parent(self, db_session):
        task = make_task(db_session, "Write report")

        with pytest.raises(ParentNotFoundException):
            TaskService(db_session).update_task(task.id, TaskUpdate(parent_task_id=999))

    def test_task_child_of_root(self, db_session):
        root = make_task(db_session, "Project")
        task = make_task(db_session, "Step")

        assert task_hierarchy_validator(db_session).validate(task.id, root.id).ok
