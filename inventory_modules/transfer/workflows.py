"""
Transfer Workflow.

pending -> approved -> completed.  Completion writes the transferred
entries.
"""

from inventory_kernel.domain.workflow import Guard, Transition, Workflow
from inventory_kernel.logging_config import get_logger
from inventory_modules.transfer.models import TransferStatus

logger = get_logger("modules.transfer.workflows")


# -----------------------------------------------------------------------------
# Guards
# -----------------------------------------------------------------------------

POOL_COVERS_TRANSFER = Guard(
    name="pool_covers_transfer",
    description="On-hand units listed on the transfer are still in the pool",
)


# -----------------------------------------------------------------------------
# Transfer Workflow
# -----------------------------------------------------------------------------

TRANSFER_WORKFLOW = Workflow(
    name="transfer",
    description="Inventory and property transfer reports",
    initial_state=TransferStatus.PENDING.value,
    states=(
        TransferStatus.PENDING.value,
        TransferStatus.APPROVED.value,
        TransferStatus.COMPLETED.value,
    ),
    transitions=(
        Transition(TransferStatus.PENDING.value, TransferStatus.APPROVED.value, action="approve"),
        Transition(
            TransferStatus.APPROVED.value,
            TransferStatus.COMPLETED.value,
            action="complete",
            guard=POOL_COVERS_TRANSFER,
            moves_stock=True,
        ),
    ),
    terminal_states=(TransferStatus.COMPLETED.value,),
)

logger.info(
    "transfer_workflow_registered",
    extra={
        "workflow_name": TRANSFER_WORKFLOW.name,
        "state_count": len(TRANSFER_WORKFLOW.states),
        "transition_count": len(TRANSFER_WORKFLOW.transitions),
        "initial_state": TRANSFER_WORKFLOW.initial_state,
    },
)
