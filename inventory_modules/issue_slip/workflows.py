"""
Issue Slip Workflow.

A slip is drafted as pending and issued once; issuing numbers the units
and writes one reissued ledger entry per unit.
"""

from inventory_kernel.domain.workflow import Guard, Transition, Workflow
from inventory_kernel.logging_config import get_logger
from inventory_modules.issue_slip.models import IssueSlipStatus

logger = get_logger("modules.issue_slip.workflows")


# -----------------------------------------------------------------------------
# Guards
# -----------------------------------------------------------------------------

WITHIN_INITIAL_QUANTITY = Guard(
    name="within_initial_quantity",
    description="Unit numbers stay within the asset's initial quantity",
)


# -----------------------------------------------------------------------------
# Issue Slip Workflow
# -----------------------------------------------------------------------------

ISSUE_SLIP_WORKFLOW = Workflow(
    name="issue_slip",
    description="ICS/PAR issuance of property units",
    initial_state=IssueSlipStatus.PENDING.value,
    states=(
        IssueSlipStatus.PENDING.value,
        IssueSlipStatus.ISSUED.value,
    ),
    transitions=(
        Transition(
            IssueSlipStatus.PENDING.value,
            IssueSlipStatus.ISSUED.value,
            action="issue",
            guard=WITHIN_INITIAL_QUANTITY,
            moves_stock=True,
        ),
    ),
    terminal_states=(IssueSlipStatus.ISSUED.value,),
)

logger.info(
    "issue_slip_workflow_registered",
    extra={
        "workflow_name": ISSUE_SLIP_WORKFLOW.name,
        "state_count": len(ISSUE_SLIP_WORKFLOW.states),
        "transition_count": len(ISSUE_SLIP_WORKFLOW.transitions),
        "initial_state": ISSUE_SLIP_WORKFLOW.initial_state,
    },
)
