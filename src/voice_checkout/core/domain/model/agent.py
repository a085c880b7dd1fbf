from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from voice_checkout.core.domain.model.errors import ValidationError
from voice_checkout.core.domain.model.lookup import exhaustive


class AgentRole(str, Enum):
    SALES = "sales"
    PAYMENT = "payment"
    SUPPORT = "support"
    MANAGER = "manager"

    @staticmethod
    def parse(raw: str) -> "AgentRole":
        text = raw.strip().lower()
        for role in AgentRole:
            if role.value == text:
                return role
        raise ValidationError(f"invalid agent role: {raw!r}")


class Capability(str, Enum):
    MENU_NAVIGATION = "menu_navigation"
    ORDER_TAKING = "order_taking"
    RECOMMENDATIONS = "recommendations"
    PRODUCT_INFORMATION = "product_information"
    TRANSFER_TO_PAYMENT = "transfer_to_payment"
    PAYMENT_PROCESSING = "payment_processing"
    ADDRESS_COLLECTION = "address_collection"
    ORDER_CONFIRMATION = "order_confirmation"
    CUSTOMER_INFORMATION = "customer_information"
    TRANSFER_TO_SALES = "transfer_to_sales"
    ISSUE_RESOLUTION = "issue_resolution"
    ORDER_TRACKING = "order_tracking"
    REFUND_PROCESSING = "refund_processing"
    ESCALATION = "escalation"
    TRANSFER_TO_MANAGER = "transfer_to_manager"
    ALL_CAPABILITIES = "all_capabilities"
    AGENT_MANAGEMENT = "agent_management"
    SYSTEM_OVERRIDE = "system_override"
    COMPLEX_ISSUES = "complex_issues"
    FINAL_DECISIONS = "final_decisions"


@dataclass(frozen=True)
class AgentProfile:
    role: AgentRole
    display_name: str
    voice: str
    temperature: float
    capabilities: frozenset[Capability]
    priority: int


C = Capability

PROFILES = exhaustive(
    AgentRole,
    {
        AgentRole.SALES: AgentProfile(
            role=AgentRole.SALES,
            display_name="Sales Agent",
            voice="alloy",
            temperature=0.7,
            capabilities=frozenset(
                {
                    C.MENU_NAVIGATION,
                    C.ORDER_TAKING,
                    C.RECOMMENDATIONS,
                    C.PRODUCT_INFORMATION,
                    C.TRANSFER_TO_PAYMENT,
                }
            ),
            priority=1,
        ),
        AgentRole.PAYMENT: AgentProfile(
            role=AgentRole.PAYMENT,
            display_name="Payment Agent",
            voice="echo",
            temperature=0.3,
            capabilities=frozenset(
                {
                    C.PAYMENT_PROCESSING,
                    C.ADDRESS_COLLECTION,
                    C.ORDER_CONFIRMATION,
                    C.CUSTOMER_INFORMATION,
                    C.TRANSFER_TO_SALES,
                }
            ),
            priority=2,
        ),
        AgentRole.SUPPORT: AgentProfile(
            role=AgentRole.SUPPORT,
            display_name="Support Agent",
            voice="nova",
            temperature=0.5,
            capabilities=frozenset(
                {
                    C.ISSUE_RESOLUTION,
                    C.ORDER_TRACKING,
                    C.REFUND_PROCESSING,
                    C.ESCALATION,
                    C.TRANSFER_TO_MANAGER,
                }
            ),
            priority=3,
        ),
        AgentRole.MANAGER: AgentProfile(
            role=AgentRole.MANAGER,
            display_name="Manager Agent",
            voice="onyx",
            temperature=0.4,
            capabilities=frozenset(
                {
                    C.ALL_CAPABILITIES,
                    C.AGENT_MANAGEMENT,
                    C.SYSTEM_OVERRIDE,
                    C.COMPLEX_ISSUES,
                    C.FINAL_DECISIONS,
                }
            ),
            priority=4,
        ),
    },
)

# manager is terminal; no role lists itself
TRANSFERS = exhaustive(
    AgentRole,
    {
        AgentRole.SALES: frozenset({AgentRole.PAYMENT, AgentRole.SUPPORT}),
        AgentRole.PAYMENT: frozenset({AgentRole.SALES, AgentRole.SUPPORT}),
        AgentRole.SUPPORT: frozenset({AgentRole.MANAGER}),
        AgentRole.MANAGER: frozenset(),
    },
)
