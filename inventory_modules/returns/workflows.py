"""
Return Workflow.

pending -> approved -> completed.  Completion writes the ledger entries.
"""

from inventory_kernel.domain.workflow import Guard, Transition, Workflow
from inventory_kernel.logging_config import get_logger
from inventory_modules.returns.models import ReturnStatus

logger = get_logger("modules.returns.workflows")


# -----------------------------------------------------------------------------
# Guards
# -----------------------------------------------------------------------------

RECEIVER_HAS_OFFICE = Guard(
    name="receiver_has_office",
    description="The user receiving the units belongs to an office",
)


# -----------------------------------------------------------------------------
# Return Workflow
# -----------------------------------------------------------------------------

RETURN_WORKFLOW = Workflow(
    name="return",
    description="Return of issued property units",
    initial_state=ReturnStatus.PENDING.value,
    states=(
        ReturnStatus.PENDING.value,
        ReturnStatus.APPROVED.value,
        ReturnStatus.COMPLETED.value,
    ),
    transitions=(
        Transition(ReturnStatus.PENDING.value, ReturnStatus.APPROVED.value, action="approve"),
        Transition(
            ReturnStatus.APPROVED.value,
            ReturnStatus.COMPLETED.value,
            action="complete",
            guard=RECEIVER_HAS_OFFICE,
            moves_stock=True,
        ),
    ),
    terminal_states=(ReturnStatus.COMPLETED.value,),
)

logger.info(
    "return_workflow_registered",
    extra={
        "workflow_name": RETURN_WORKFLOW.name,
        "state_count": len(RETURN_WORKFLOW.states),
        "transition_count": len(RETURN_WORKFLOW.transitions),
        "initial_state": RETURN_WORKFLOW.initial_state,
    },
)
