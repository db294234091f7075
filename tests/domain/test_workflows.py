"""
Tests for the workflow value objects and every document's transition table.
"""

import pytest

from inventory_kernel.domain.workflow import Guard, Transition, Workflow, state_name
from inventory_kernel.exceptions import InvalidTransitionError
from inventory_modules.issue_slip.models import IssueSlipStatus
from inventory_modules.issue_slip.workflows import ISSUE_SLIP_WORKFLOW
from inventory_modules.loss.models import LossReportStatus
from inventory_modules.loss.workflows import LOSS_WORKFLOW
from inventory_modules.maintenance.models import MaintenanceStatus
from inventory_modules.maintenance.workflows import MAINTENANCE_WORKFLOW
from inventory_modules.returns.models import ReturnStatus
from inventory_modules.returns.workflows import RETURN_WORKFLOW
from inventory_modules.ris.models import RisStatus
from inventory_modules.ris.workflows import RIS_WORKFLOW
from inventory_modules.transfer.models import TransferStatus
from inventory_modules.transfer.workflows import TRANSFER_WORKFLOW
from inventory_modules.waste.models import WasteStatus
from inventory_modules.waste.workflows import WASTE_WORKFLOW

ALL_WORKFLOWS = [
    ISSUE_SLIP_WORKFLOW,
    RETURN_WORKFLOW,
    LOSS_WORKFLOW,
    WASTE_WORKFLOW,
    MAINTENANCE_WORKFLOW,
    RIS_WORKFLOW,
    TRANSFER_WORKFLOW,
]


# ---------------------------------------------------------------------------
# Workflow value object
# ---------------------------------------------------------------------------


class TestWorkflowDefinition:
    def test_unknown_initial_state_rejected(self):
        with pytest.raises(ValueError):
            Workflow(
                name="bad",
                description="",
                initial_state="nowhere",
                states=("a",),
                transitions=(),
            )

    def test_transition_to_unknown_state_rejected(self):
        with pytest.raises(ValueError):
            Workflow(
                name="bad",
                description="",
                initial_state="a",
                states=("a",),
                transitions=(Transition("a", "b", action="go"),),
            )

    def test_terminal_state_with_outgoing_transition_rejected(self):
        with pytest.raises(ValueError):
            Workflow(
                name="bad",
                description="",
                initial_state="a",
                states=("a", "b"),
                transitions=(Transition("b", "a", action="back"),),
                terminal_states=("b",),
            )

    def test_transition_for_returns_guarded_transition(self):
        guard = Guard("ready", "Ready to go")
        workflow = Workflow(
            name="simple",
            description="",
            initial_state="a",
            states=("a", "b"),
            transitions=(Transition("a", "b", action="go", guard=guard, moves_stock=True),),
            terminal_states=("b",),
        )
        transition = workflow.transition_for("a", "b")
        assert transition.guard is guard
        assert transition.moves_stock

    def test_invalid_transition_error_fields(self):
        with pytest.raises(InvalidTransitionError) as exc_info:
            ISSUE_SLIP_WORKFLOW.transition_for(IssueSlipStatus.ISSUED, IssueSlipStatus.PENDING)
        error = exc_info.value
        assert error.document_type == "issue_slip"
        assert error.current == "issued"
        assert error.target == "pending"

    def test_state_name_accepts_enum_or_str(self):
        assert state_name(RisStatus.ISSUED) == "issued"
        assert state_name("issued") == "issued"


# ---------------------------------------------------------------------------
# Document workflows
# ---------------------------------------------------------------------------


class TestDocumentWorkflows:
    @pytest.mark.parametrize("workflow", ALL_WORKFLOWS, ids=lambda w: w.name)
    def test_terminal_states_are_dead_ends(self, workflow):
        table = workflow.transition_table()
        for state in workflow.terminal_states:
            assert table[state] == frozenset()

    @pytest.mark.parametrize("workflow", ALL_WORKFLOWS, ids=lambda w: w.name)
    def test_every_state_reachable_from_initial(self, workflow):
        table = workflow.transition_table()
        seen = {workflow.initial_state}
        frontier = [workflow.initial_state]
        while frontier:
            for target in table[frontier.pop()]:
                if target not in seen:
                    seen.add(target)
                    frontier.append(target)
        assert seen == set(workflow.states)

    def test_only_stock_moving_transitions_are_flagged(self):
        flagged = {
            (w.name, t.action)
            for w in ALL_WORKFLOWS
            for t in w.transitions
            if t.moves_stock
        }
        assert flagged == {
            ("issue_slip", "issue"),
            ("return", "complete"),
            ("loss", "complete"),
            ("ris", "issue"),
            ("transfer", "complete"),
        }

    def test_return_lifecycle(self):
        assert RETURN_WORKFLOW.can_transition(ReturnStatus.PENDING, ReturnStatus.APPROVED)
        assert RETURN_WORKFLOW.can_transition(ReturnStatus.APPROVED, ReturnStatus.COMPLETED)
        assert not RETURN_WORKFLOW.can_transition(ReturnStatus.PENDING, ReturnStatus.COMPLETED)

    def test_loss_lifecycle(self):
        assert LOSS_WORKFLOW.can_transition(LossReportStatus.PENDING, LossReportStatus.APPROVED)
        assert not LOSS_WORKFLOW.can_transition(
            LossReportStatus.PENDING, LossReportStatus.COMPLETED
        )

    def test_waste_lifecycle(self):
        assert WASTE_WORKFLOW.allowed_targets(WasteStatus.PENDING) == {"completed"}

    def test_maintenance_can_be_rescheduled_repeatedly(self):
        assert MAINTENANCE_WORKFLOW.can_transition(
            MaintenanceStatus.RESCHEDULED, MaintenanceStatus.RESCHEDULED
        )
        assert not MAINTENANCE_WORKFLOW.can_transition(
            MaintenanceStatus.PENDING, MaintenanceStatus.RESCHEDULED
        )
        assert not MAINTENANCE_WORKFLOW.can_transition(
            MaintenanceStatus.SCHEDULED, MaintenanceStatus.CANCELLED
        )

    def test_ris_cancellable_until_issued(self):
        for status in (
            RisStatus.FOR_EVALUATION,
            RisStatus.EVALUATING,
            RisStatus.FOR_REVIEW,
            RisStatus.PENDING,
        ):
            assert RIS_WORKFLOW.can_transition(status, RisStatus.CANCELLED)
        assert not RIS_WORKFLOW.can_transition(RisStatus.ISSUED, RisStatus.CANCELLED)

    def test_transfer_lifecycle(self):
        assert TRANSFER_WORKFLOW.can_transition(TransferStatus.PENDING, TransferStatus.APPROVED)
        assert not TRANSFER_WORKFLOW.can_transition(
            TransferStatus.PENDING, TransferStatus.COMPLETED
        )
