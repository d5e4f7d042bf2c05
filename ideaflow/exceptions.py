"""
Workflow Engine Exceptions
Typed errors raised by the approval workflow services

Every exception carries a machine-readable ``code`` plus the identifiers
involved, so the HTTP layer can map it without parsing messages:

    WorkflowEngineError
    +-- ApprovalTaskNotFoundError        APPROVAL_TASK_NOT_FOUND
    +-- AlreadyProcessedError            ALREADY_PROCESSED
    +-- WorkflowClosedError              WORKFLOW_CLOSED
    +-- WorkflowAlreadyInitializedError  WORKFLOW_ALREADY_INITIALIZED
    +-- InvalidPolicyError               INVALID_POLICY
"""


class WorkflowEngineError(Exception):
    """Base exception for the approval workflow engine"""

    code: str = "WORKFLOW_ENGINE_ERROR"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ApprovalTaskNotFoundError(WorkflowEngineError):
    """The approval task does not exist in the tenant"""

    code = "APPROVAL_TASK_NOT_FOUND"

    def __init__(self, task_id: int):
        self.task_id = task_id
        super().__init__(f"Approval task {task_id} not found")


class AlreadyProcessedError(WorkflowEngineError):
    """The approval task was already approved or rejected"""

    code = "ALREADY_PROCESSED"

    def __init__(self, task_id: int, current_status: str):
        self.task_id = task_id
        self.current_status = current_status
        super().__init__(
            f"Approval task {task_id} has already been processed (status: {current_status})"
        )


class WorkflowClosedError(WorkflowEngineError):
    """The idea already reached a final decision"""

    code = "WORKFLOW_CLOSED"

    def __init__(self, idea_id: int, idea_status: str):
        self.idea_id = idea_id
        self.idea_status = idea_status
        super().__init__(
            f"Idea {idea_id} is no longer under review (status: {idea_status})"
        )


class WorkflowAlreadyInitializedError(WorkflowEngineError):
    """Approval tasks already exist for the idea"""

    code = "WORKFLOW_ALREADY_INITIALIZED"

    def __init__(self, idea_id: int, existing_tasks: int):
        self.idea_id = idea_id
        self.existing_tasks = existing_tasks
        super().__init__(
            f"Idea {idea_id} already has {existing_tasks} approval task(s)"
        )


class InvalidPolicyError(WorkflowEngineError):
    """Stored level definitions of a policy are malformed"""

    code = "INVALID_POLICY"

    def __init__(self, policy_id, reason: str):
        self.policy_id = policy_id
        self.reason = reason
        super().__init__(f"Approval workflow {policy_id} is invalid: {reason}")
