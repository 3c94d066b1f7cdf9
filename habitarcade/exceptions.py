"""
Custom exceptions for the habit tracker application.
Every exception carries a machine-readable code that the HTTP layer returns.
"""


class HabitArcadeException(Exception):
    """Base exception for habit tracker application"""
    code = "INTERNAL_ERROR"


class NotFoundException(HabitArcadeException):
    """Base for missing entities"""
    code = "NOT_FOUND"


class HabitNotFoundException(NotFoundException):
    """Raised when a habit is not found"""
    code = "HABIT_NOT_FOUND"

    def __init__(self, habit_id: int):
        self.habit_id = habit_id
        super().__init__(f"Habit with ID {habit_id} not found")


class TaskNotFoundException(NotFoundException):
    """Raised when a task is not found"""
    code = "TASK_NOT_FOUND"

    def __init__(self, task_id: int):
        self.task_id = task_id
        super().__init__(f"Task with ID {task_id} not found")


class ParentNotFoundException(NotFoundException):
    """Raised when a proposed parent does not exist or is deleted"""
    code = "PARENT_NOT_FOUND"

    def __init__(self, parent_id: int):
        self.parent_id = parent_id
        super().__init__(f"Parent with ID {parent_id} not found")


class ValidationException(HabitArcadeException):
    """Raised when data validation fails"""
    code = "VALIDATION_ERROR"

    def __init__(self, field: str, message: str, code: str = None):
        self.field = field
        self.message = message
        if code:
            self.code = code
        super().__init__(f"Validation error for {field}: {message}")


class HierarchyValidationException(ValidationException):
    """Raised when a parent assignment would break the parent/child structure"""

    def __init__(self, field: str, message: str, code: str):
        super().__init__(field, message, code)


class DatabaseException(HabitArcadeException):
    """Raised when database operations fail"""

    def __init__(self, operation: str, details: str):
        self.operation = operation
        self.details = details
        super().__init__(f"Database {operation} failed: {details}")


class ReconciliationInvariantError(HabitArcadeException):
    """
    Raised when auto-fill is about to write outside its date window or over
    an existing entry. Indicates a bug; never handled.
    """
    code = "RECONCILIATION_INVARIANT"
