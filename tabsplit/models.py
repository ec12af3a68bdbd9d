# tabsplit/models.py
"""
Value objects handed to and returned by the engine.

Split policies form a small tagged union (``Equal``, ``Unequal``,
``Percentage``) checked when they are built. Whether a split adds up to its
expense is only known once the amount and roster are in hand, so that check
lives in :mod:`tabsplit.balances`.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, Hashable, Optional, Tuple

from .exceptions import InvalidPaymentError, InvalidSplitPolicyError, MalformedExpenseError
from .money import CENT, fits_cents, to_decimal


@dataclass(frozen=True)
class Member:
    id: Hashable
    name: str = ""

    @property
    def display_name(self):
        return self.name or str(self.id)


def _checked_values(kind, values):
    if not values:
        raise InvalidSplitPolicyError(f"{kind} split needs at least one member")
    out = {}
    for member_id, value in dict(values).items():
        try:
            number = to_decimal(value)
        except TypeError:
            raise InvalidSplitPolicyError(
                f"{kind} split value for {member_id!r} is not a number: {value!r}"
            ) from None
        if not number.is_finite() or number < 0:
            raise InvalidSplitPolicyError(
                f"{kind} split value for {member_id!r} must be a non-negative number"
            )
        if not fits_cents(number):
            raise InvalidSplitPolicyError(f"{kind} split value for {member_id!r} is too large")
        out[member_id] = number
    return out


@dataclass(frozen=True)
class Equal:
    """Divide evenly among ``participants``, or the whole group when None."""
    participants: Optional[Tuple[Hashable, ...]] = None
    type = "equal"

    def __post_init__(self):
        if self.participants is not None:
            # keep first occurrence, drop duplicates
            object.__setattr__(self, "participants", tuple(dict.fromkeys(self.participants)))


@dataclass(frozen=True)
class Unequal:
    """Custom amounts per member."""
    shares: Dict[Hashable, Decimal]
    type = "unequal"

    def __post_init__(self):
        object.__setattr__(self, "shares", _checked_values("Unequal", self.shares))


@dataclass(frozen=True)
class Percentage:
    """Percent of the expense per member; should add up to 100."""
    percentages: Dict[Hashable, Decimal]
    type = "percentage"

    def __post_init__(self):
        object.__setattr__(self, "percentages", _checked_values("Percentage", self.percentages))


SplitPolicy = (Equal, Unequal, Percentage)


@dataclass(frozen=True)
class Expense:
    amount: Decimal
    paid_by: Hashable
    split: Any = field(default_factory=Equal)
    id: Optional[Hashable] = None
    description: str = ""

    def __post_init__(self):
        try:
            amount = to_decimal(self.amount)
        except TypeError:
            raise MalformedExpenseError(self.ref, f"amount is not a number: {self.amount!r}") from None
        if not amount.is_finite() or amount <= 0:
            raise MalformedExpenseError(self.ref, "amount must be positive")
        if not fits_cents(amount):
            raise MalformedExpenseError(self.ref, "amount is too large")
        if not isinstance(self.split, SplitPolicy):
            raise InvalidSplitPolicyError(f"Unsupported split policy: {self.split!r}")
        object.__setattr__(self, "amount", amount)

    @property
    def ref(self):
        return repr(self.id) if self.id is not None else (self.description or "<unnamed>")


@dataclass(frozen=True)
class Payment:
    """Money one member has already handed to another."""
    from_member: Hashable
    to_member: Hashable
    amount: Decimal

    def __post_init__(self):
        try:
            amount = to_decimal(self.amount)
        except TypeError:
            raise InvalidPaymentError(f"Payment amount is not a number: {self.amount!r}") from None
        if not amount.is_finite() or amount <= 0:
            raise InvalidPaymentError("Payment amount must be positive")
        if not fits_cents(amount):
            raise InvalidPaymentError("Payment amount is too large")
        if self.from_member == self.to_member:
            raise InvalidPaymentError("Payment must be between two different members")
        object.__setattr__(self, "amount", amount)


@dataclass(frozen=True)
class Settlement:
    """A suggested transfer: ``from_member`` pays ``to_member``."""
    from_member: Hashable
    to_member: Hashable
    amount: Decimal

    def describe(self, names=None):
        names = names or {}
        debtor = names.get(self.from_member, self.from_member)
        creditor = names.get(self.to_member, self.to_member)
        return f"{debtor} owes {creditor} ${self.amount.quantize(CENT)}"

    def to_dict(self):
        return {"from": self.from_member, "to": self.to_member, "amount": str(self.amount)}


@dataclass(frozen=True)
class MemberSummary:
    member: Member
    paid: Decimal
    share: Decimal
    sent: Decimal
    received: Decimal
    balance: Decimal

    def to_dict(self):
        return {
            "member": self.member.id,
            "name": self.member.display_name,
            "paid": str(self.paid),
            "share": str(self.share),
            "sent": str(self.sent),
            "received": str(self.received),
            "balance": str(self.balance),
        }
