"""
Loss Workflow.

pending -> approved (by the named supervisor) -> completed.
"""

from inventory_kernel.domain.workflow import Guard, Transition, Workflow
from inventory_kernel.logging_config import get_logger
from inventory_modules.loss.models import LossReportStatus

logger = get_logger("modules.loss.workflows")


# -----------------------------------------------------------------------------
# Guards
# -----------------------------------------------------------------------------

SUPERVISOR_APPROVES = Guard(
    name="supervisor_approves",
    description="Only the supervisor named on the report approves it",
)


# -----------------------------------------------------------------------------
# Loss Workflow
# -----------------------------------------------------------------------------

LOSS_WORKFLOW = Workflow(
    name="loss",
    description="Report of lost, stolen, damaged or destroyed property",
    initial_state=LossReportStatus.PENDING.value,
    states=(
        LossReportStatus.PENDING.value,
        LossReportStatus.APPROVED.value,
        LossReportStatus.COMPLETED.value,
    ),
    transitions=(
        Transition(
            LossReportStatus.PENDING.value,
            LossReportStatus.APPROVED.value,
            action="approve",
            guard=SUPERVISOR_APPROVES,
        ),
        Transition(
            LossReportStatus.APPROVED.value,
            LossReportStatus.COMPLETED.value,
            action="complete",
            moves_stock=True,
        ),
    ),
    terminal_states=(LossReportStatus.COMPLETED.value,),
)

logger.info(
    "loss_workflow_registered",
    extra={
        "workflow_name": LOSS_WORKFLOW.name,
        "state_count": len(LOSS_WORKFLOW.states),
        "transition_count": len(LOSS_WORKFLOW.transitions),
        "initial_state": LOSS_WORKFLOW.initial_state,
    },
)
