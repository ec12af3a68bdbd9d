# tabsplit/exceptions.py
"""Errors raised by the balance and settlement engine."""


class TabsplitError(Exception):
    """Base class for every error raised by tabsplit."""
    status_code = 400


class InvalidPayloadError(TabsplitError):
    """The request body does not have the expected shape."""


class InvalidSplitPolicyError(TabsplitError):
    """A split policy was built with negative, non-numeric or oversized values."""


class InvalidPaymentError(TabsplitError):
    """A recorded payment has a bad amount or the same member on both ends."""


class MalformedExpenseError(TabsplitError):
    """An expense's split does not add up, or references a non-member."""
    status_code = 422

    def __init__(self, expense_ref, reason):
        self.expense_ref = expense_ref
        self.reason = reason
        super().__init__(f"Expense {expense_ref}: {reason}")


class NoParticipantsError(MalformedExpenseError):
    """An equal split has nobody to divide the amount between."""

    def __init__(self, expense_ref):
        super().__init__(expense_ref, "equal split has no participants")


class UnknownMemberError(TabsplitError):
    """A recorded payment names someone outside the group."""
    status_code = 422

    def __init__(self, member_id):
        self.member_id = member_id
        super().__init__(f"Unknown member: {member_id!r}")


class UnbalancedLedgerError(TabsplitError):
    """Balances do not net to zero, so no complete settlement exists."""
    status_code = 422

    def __init__(self, total):
        self.total = total
        super().__init__(f"Balances sum to {total}, expected 0")
