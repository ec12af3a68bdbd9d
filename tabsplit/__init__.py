# tabsplit/__init__.py
from .balances import compute_balances, expense_debits, summarize_members
from .exceptions import (
    InvalidPayloadError,
    InvalidPaymentError,
    InvalidSplitPolicyError,
    MalformedExpenseError,
    NoParticipantsError,
    TabsplitError,
    UnbalancedLedgerError,
    UnknownMemberError,
)
from .models import Equal, Expense, Member, MemberSummary, Payment, Percentage, Settlement, Unequal
from .settlement import GroupSettlement, apply_settlements, calculate_settlements, settle_group

__version__ = "0.2.0"
