"""
RIS Workflow.

for-evaluation -> evaluating -> for-review -> pending -> issued, with
cancelled reachable from every state before issued.  Issuing moves the
stock out.
"""

from inventory_kernel.domain.workflow import Guard, Transition, Workflow
from inventory_kernel.logging_config import get_logger
from inventory_modules.ris.models import RisStatus

logger = get_logger("modules.ris.workflows")


# -----------------------------------------------------------------------------
# Guards
# -----------------------------------------------------------------------------

WITHIN_AVAILABLE_STOCK = Guard(
    name="within_available_stock",
    description="Every evaluated issue quantity is covered by the asset quantity",
)

HAS_ITEMS_TO_ISSUE = Guard(
    name="has_items_to_issue",
    description="At least one line has a non-zero issue quantity",
)


# -----------------------------------------------------------------------------
# RIS Workflow
# -----------------------------------------------------------------------------

_OPEN_STATES = (
    RisStatus.FOR_EVALUATION.value,
    RisStatus.EVALUATING.value,
    RisStatus.FOR_REVIEW.value,
    RisStatus.PENDING.value,
)

RIS_WORKFLOW = Workflow(
    name="ris",
    description="Requisition and issue of consumables",
    initial_state=RisStatus.FOR_EVALUATION.value,
    states=(*_OPEN_STATES, RisStatus.ISSUED.value, RisStatus.CANCELLED.value),
    transitions=(
        Transition(
            RisStatus.FOR_EVALUATION.value,
            RisStatus.EVALUATING.value,
            action="evaluate",
        ),
        Transition(
            RisStatus.EVALUATING.value,
            RisStatus.FOR_REVIEW.value,
            action="submit_for_review",
            guard=WITHIN_AVAILABLE_STOCK,
        ),
        Transition(RisStatus.FOR_REVIEW.value, RisStatus.PENDING.value, action="approve"),
        Transition(
            RisStatus.PENDING.value,
            RisStatus.ISSUED.value,
            action="issue",
            guard=HAS_ITEMS_TO_ISSUE,
            moves_stock=True,
        ),
        *(
            Transition(state, RisStatus.CANCELLED.value, action="cancel")
            for state in _OPEN_STATES
        ),
    ),
    terminal_states=(RisStatus.ISSUED.value, RisStatus.CANCELLED.value),
)

logger.info(
    "ris_workflow_registered",
    extra={
        "workflow_name": RIS_WORKFLOW.name,
        "state_count": len(RIS_WORKFLOW.states),
        "transition_count": len(RIS_WORKFLOW.transitions),
        "initial_state": RIS_WORKFLOW.initial_state,
    },
)
