"""Services for ledger business logic."""

from .exceptions import (
    LedgerServiceError,
    InvalidAmountError,
    InvalidPartyError,
    NoOutstandingOrdersError,
    PersistenceFailureError,
    OrderNotFoundError,
    InvalidOrderError,
    PaidAmountExceedsTotalError,
)
from .allocation import (
    AllocationStep,
    AllocationPlan,
    AllocationResult,
    get_order_model,
    plan_allocation,
    allocate_payment,
)
from .balances import (
    BalanceSummary,
    PartySummary,
    BalanceSheet,
    summarize,
    group_by_party,
    global_balance,
    get_balance_sheet,
    get_party_reports,
    get_party_report,
)
from .orders import (
    create_sale,
    create_purchase,
    update_order_payment,
    list_orders,
)

__all__ = [
    # Exceptions
    'LedgerServiceError',
    'InvalidAmountError',
    'InvalidPartyError',
    'NoOutstandingOrdersError',
    'PersistenceFailureError',
    'OrderNotFoundError',
    'InvalidOrderError',
    'PaidAmountExceedsTotalError',
    # Payment Allocation
    'AllocationStep',
    'AllocationPlan',
    'AllocationResult',
    'get_order_model',
    'plan_allocation',
    'allocate_payment',
    # Balances
    'BalanceSummary',
    'PartySummary',
    'BalanceSheet',
    'summarize',
    'group_by_party',
    'global_balance',
    'get_balance_sheet',
    'get_party_reports',
    'get_party_report',
    # Orders
    'create_sale',
    'create_purchase',
    'update_order_payment',
    'list_orders',
]
