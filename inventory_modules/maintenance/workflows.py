"""
Maintenance Workflow.

    pending     -> scheduled | completed | cancelled
    scheduled   -> rescheduled | completed
    rescheduled -> rescheduled | completed

No transition moves stock.
"""

from inventory_kernel.domain.workflow import Transition, Workflow
from inventory_kernel.logging_config import get_logger
from inventory_modules.maintenance.models import MaintenanceStatus

logger = get_logger("modules.maintenance.workflows")

_PENDING = MaintenanceStatus.PENDING.value
_SCHEDULED = MaintenanceStatus.SCHEDULED.value
_RESCHEDULED = MaintenanceStatus.RESCHEDULED.value
_COMPLETED = MaintenanceStatus.COMPLETED.value
_CANCELLED = MaintenanceStatus.CANCELLED.value


MAINTENANCE_WORKFLOW = Workflow(
    name="maintenance",
    description="Maintenance request for one unit",
    initial_state=_PENDING,
    states=(_PENDING, _SCHEDULED, _RESCHEDULED, _COMPLETED, _CANCELLED),
    transitions=(
        Transition(_PENDING, _SCHEDULED, action="schedule"),
        Transition(_PENDING, _COMPLETED, action="complete"),
        Transition(_PENDING, _CANCELLED, action="cancel"),
        Transition(_SCHEDULED, _RESCHEDULED, action="reschedule"),
        Transition(_SCHEDULED, _COMPLETED, action="complete"),
        Transition(_RESCHEDULED, _RESCHEDULED, action="reschedule"),
        Transition(_RESCHEDULED, _COMPLETED, action="complete"),
    ),
    terminal_states=(_COMPLETED, _CANCELLED),
)

logger.info(
    "maintenance_workflow_registered",
    extra={
        "workflow_name": MAINTENANCE_WORKFLOW.name,
        "state_count": len(MAINTENANCE_WORKFLOW.states),
        "transition_count": len(MAINTENANCE_WORKFLOW.transitions),
        "initial_state": MAINTENANCE_WORKFLOW.initial_state,
    },
)
