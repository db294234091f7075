"""
Waste Workflow.

pending -> completed, once disposal is approved.  No ledger writes: the
units were already recorded ``for-disposal`` by their return.
"""

from inventory_kernel.domain.workflow import Guard, Transition, Workflow
from inventory_kernel.logging_config import get_logger
from inventory_modules.waste.models import WasteStatus

logger = get_logger("modules.waste.workflows")


# -----------------------------------------------------------------------------
# Guards
# -----------------------------------------------------------------------------

DISPOSAL_APPROVED = Guard(
    name="disposal_approved",
    description="A disposal approver has signed the report",
)


# -----------------------------------------------------------------------------
# Waste Workflow
# -----------------------------------------------------------------------------

WASTE_WORKFLOW = Workflow(
    name="waste",
    description="Waste materials report",
    initial_state=WasteStatus.PENDING.value,
    states=(WasteStatus.PENDING.value, WasteStatus.COMPLETED.value),
    transitions=(
        Transition(
            WasteStatus.PENDING.value,
            WasteStatus.COMPLETED.value,
            action="approve_disposal",
            guard=DISPOSAL_APPROVED,
        ),
    ),
    terminal_states=(WasteStatus.COMPLETED.value,),
)

logger.info(
    "waste_workflow_registered",
    extra={
        "workflow_name": WASTE_WORKFLOW.name,
        "state_count": len(WASTE_WORKFLOW.states),
        "transition_count": len(WASTE_WORKFLOW.transitions),
        "initial_state": WASTE_WORKFLOW.initial_state,
    },
)
