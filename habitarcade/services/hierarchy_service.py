"""
Parent/child structure validation for habits and tasks.

Both hierarchies are flat: a root may have children, a child may not have
children of its own, and nothing may be its own ancestor.
"""
from typing import Callable, NamedTuple, Optional
from sqlalchemy.orm import Session

from habitarcade.constants import MAX_HIERARCHY_DEPTH
from habitarcade.exceptions import HierarchyValidationException, ParentNotFoundException
from habitarcade.repositories.habit_repository import HabitRepository
from habitarcade.repositories.task_repository import TaskRepository

SELF_PARENT = "SELF_PARENT"
PARENT_NOT_FOUND = "PARENT_NOT_FOUND"
CYCLIC_HIERARCHY = "CYCLIC_HIERARCHY"
NESTED_HIERARCHY = "NESTED_HIERARCHY"


class HierarchyCheck(NamedTuple):
    ok: bool
    code: Optional[str] = None
    reason: Optional[str] = None


OK = HierarchyCheck(True)


class HierarchyValidator:
    """
    Validates a proposed parent reference against the existing parent graph.

    Args:
        lookup_parent: id -> parent id (None for roots and unknown ids)
        exists: id -> True if the entity exists and is not deleted
        has_children: id -> True if the entity already has children
        max_depth: Upper bound on the ancestor walk
        field: Field name reported in validation errors
    """

    def __init__(
        self,
        lookup_parent: Callable[[int], Optional[int]],
        exists: Callable[[int], bool],
        has_children: Optional[Callable[[int], bool]] = None,
        max_depth: int = MAX_HIERARCHY_DEPTH,
        field: str = "parent_id"
    ):
        self.lookup_parent = lookup_parent
        self.exists = exists
        self.has_children = has_children
        self.max_depth = max_depth
        self.field = field

    def validate(self, entity_id: Optional[int], proposed_parent_id: Optional[int]) -> HierarchyCheck:
        """
        Check a parent assignment. Rules short-circuit in order:
        detach, self-parent, missing parent, cycle, nesting.

        Args:
            entity_id: Entity being written (None when creating)
            proposed_parent_id: New parent (None detaches)

        Returns:
            HierarchyCheck with ok=False, a code and a reason on rejection
        """
        if proposed_parent_id is None:
            return OK

        if entity_id is not None and proposed_parent_id == entity_id:
            return HierarchyCheck(False, SELF_PARENT, "cannot be its own parent")

        if not self.exists(proposed_parent_id):
            return HierarchyCheck(False, PARENT_NOT_FOUND, "parent not found")

        ancestor = proposed_parent_id
        for _ in range(self.max_depth):
            if ancestor is None:
                break
            if entity_id is not None and ancestor == entity_id:
                return HierarchyCheck(False, CYCLIC_HIERARCHY, "would create a cyclic hierarchy")
            ancestor = self.lookup_parent(ancestor)

        if self.lookup_parent(proposed_parent_id) is not None:
            return HierarchyCheck(False, NESTED_HIERARCHY, "proposed parent is already a child")

        if entity_id is not None and self.has_children is not None and self.has_children(entity_id):
            return HierarchyCheck(False, NESTED_HIERARCHY, "an entity with children cannot become a child")

        return OK

    def ensure_valid(self, entity_id: Optional[int], proposed_parent_id: Optional[int]) -> None:
        """
        Same as validate, but raises on rejection.

        Raises:
            ParentNotFoundException: If the parent is missing or deleted
            HierarchyValidationException: For self, cyclic or nested parents
        """
        check = self.validate(entity_id, proposed_parent_id)
        if check.ok:
            return
        if check.code == PARENT_NOT_FOUND:
            raise ParentNotFoundException(proposed_parent_id)
        raise HierarchyValidationException(self.field, check.reason, check.code)


def habit_hierarchy_validator(db: Session) -> HierarchyValidator:
    """Validator over the habits parent graph"""
    return HierarchyValidator(
        lookup_parent=lambda habit_id: HabitRepository.get_parent_id(db, habit_id),
        exists=lambda habit_id: HabitRepository.get_active_by_id(db, habit_id) is not None,
        has_children=lambda habit_id: HabitRepository.has_children(db, habit_id),
        field="parent_habit_id",
    )


def task_hierarchy_validator(db: Session) -> HierarchyValidator:
    """Validator over the tasks parent graph"""
    return HierarchyValidator(
        lookup_parent=lambda task_id: TaskRepository.get_parent_id(db, task_id),
        exists=lambda task_id: TaskRepository.get_active_by_id(db, task_id) is not None,
        has_children=lambda task_id: TaskRepository.has_children(db, task_id),
        field="parent_task_id",
    )
