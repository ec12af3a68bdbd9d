# tabsplit/balances.py
"""
Fold a group's expenses into per-member net balances.

Positive balance: the member is owed money. Negative: the member owes.
Nothing is stored between calls; every result is rebuilt from the inputs.
"""
import logging
from decimal import Decimal

from .exceptions import MalformedExpenseError, NoParticipantsError, UnknownMemberError
from .models import Equal, Member, MemberSummary, Percentage, Unequal
from .money import DEFAULT_TOLERANCE, allocate, from_cents, to_cents, to_decimal

logger = logging.getLogger(__name__)

HUNDRED = Decimal(100)


def _roster(members):
    roster = [m if isinstance(m, Member) else Member(id=m) for m in members]
    if not roster:
        raise ValueError("A group needs at least one member")
    seen = set()
    for m in roster:
        if m.id in seen:
            raise ValueError(f"Duplicate member id: {m.id!r}")
        seen.add(m.id)
    return roster


def _ref(expense, index):
    return expense.ref if expense.id is not None else f"#{index}"


def _known_only(ids, known, ref, strict):
    unknown = [i for i in ids if i not in known]
    if unknown:
        if strict:
            raise MalformedExpenseError(ref, f"not group members: {unknown!r}")
        logger.warning("Expense %s: ignoring non-members %r", ref, unknown)
    return [i for i in ids if i in known]


def _proportional(ref, amount, values, target, what, tolerance, strict, scale):
    """Debits for an unequal or percentage split, in cents."""
    ids = list(values)
    total = sum(values.values(), Decimal(0))
    # off by up to the tolerance still counts; allocate() spreads the gap
    if abs(total - target) <= tolerance:
        return dict(zip(ids, allocate(to_cents(amount), values.values())))

    if strict:
        raise MalformedExpenseError(ref, f"{what} sum to {total}, expected {target}")
    # legacy: apply every share as entered, even if it over- or under-allocates
    logger.warning("Expense %s: %s sum to %s, expected %s", ref, what, total, target)
    return {i: to_cents(scale(v)) for i, v in values.items()}


def expense_debits(expense, roster_ids, *, index=0, tolerance=DEFAULT_TOLERANCE, strict=True):
    """
    Return ``{member_id: cents}`` that each participant owes for one expense.

    ``roster_ids`` is the ordered list of group member ids; it is the
    participant list for an ``Equal`` split that names nobody.

    Shares and percentages that add up to within ``tolerance`` of their
    target are not debited verbatim: the whole amount is spread in
    proportion to them, whole cents only, with leftover cents going to the
    largest remainders. 3.333 x 3 of 10.00 debits 3.34, 3.33, 3.33, and
    3.33 x 3 of 10.00 debits 3.34, 3.33, 3.33 as well. Either way the
    debits sum exactly to the expense amount.
    """
    ref = _ref(expense, index)
    known = set(roster_ids)
    split = expense.split
    amount = expense.amount

    if isinstance(split, Equal):
        participants = roster_ids if split.participants is None else split.participants
        participants = _known_only(participants, known, ref, strict)
        if not participants:
            if strict:
                raise NoParticipantsError(ref)
            logger.warning("Expense %s: equal split has no participants, nothing debited", ref)
            return {}
        return dict(zip(participants, allocate(to_cents(amount), [1] * len(participants))))

    if isinstance(split, Unequal):
        shares = {i: split.shares[i] for i in _known_only(list(split.shares), known, ref, strict)}
        return _proportional(ref, amount, shares, amount, "shares", tolerance, strict,
                             scale=lambda v: v)

    if isinstance(split, Percentage):
        pcts = {i: split.percentages[i] for i in _known_only(list(split.percentages), known, ref, strict)}
        return _proportional(ref, amount, pcts, HUNDRED, "percentages", tolerance, strict,
                             scale=lambda v: amount * v / HUNDRED)

    raise MalformedExpenseError(ref, f"unsupported split {split!r}")


def _fold(members, expenses, payments, tolerance, strict):
    roster = _roster(members)
    ids = [m.id for m in roster]
    paid = dict.fromkeys(ids, 0)
    share = dict.fromkeys(ids, 0)
    sent = dict.fromkeys(ids, 0)
    received = dict.fromkeys(ids, 0)

    for index, expense in enumerate(expenses):
        # 1. Credit the payer
        if expense.paid_by in paid:
            paid[expense.paid_by] += to_cents(expense.amount)
        elif strict:
            raise MalformedExpenseError(_ref(expense, index), f"payer {expense.paid_by!r} is not a group member")
        else:
            logger.warning("Expense %s: payer %r is not a group member, credit skipped",
                           _ref(expense, index), expense.paid_by)

        # 2. Debit the participants
        debits = expense_debits(expense, ids, index=index, tolerance=tolerance, strict=strict)
        for member_id, cents in debits.items():
            share[member_id] += cents

    for payment in payments:
        missing = [m for m in (payment.from_member, payment.to_member) if m not in sent]
        if missing:
            if strict:
                raise UnknownMemberError(missing[0])
            logger.warning("Ignoring payment involving non-members %r", missing)
            continue
        cents = to_cents(payment.amount)
        sent[payment.from_member] += cents
        received[payment.to_member] += cents

    return roster, paid, share, sent, received


def compute_balances(members, expenses, payments=(), *, tolerance=DEFAULT_TOLERANCE, strict=True):
    """
    Net balance per member, in roster order.

    Every member starts at zero. Each expense credits its payer with the full
    amount and debits participants according to its split policy. Recorded
    payments move money from ``from_member`` to ``to_member``.

    With ``strict=False`` malformed splits are applied as entered and
    references to non-members are skipped; each anomaly is logged.
    """
    tolerance = to_decimal(tolerance)
    roster, paid, share, sent, received = _fold(members, expenses, payments, tolerance, strict)
    balances = {
        m.id: from_cents(paid[m.id] - share[m.id] + sent[m.id] - received[m.id])
        for m in roster
    }
    logger.debug("Computed balances for %d members over %d expenses", len(balances), len(expenses))
    return balances


def summarize_members(members, expenses, payments=(), *, tolerance=DEFAULT_TOLERANCE, strict=True):
    """Per-member totals: paid, consumed share, payments sent/received, and net."""
    tolerance = to_decimal(tolerance)
    roster, paid, share, sent, received = _fold(members, expenses, payments, tolerance, strict)
    return [
        MemberSummary(
            member=m,
            paid=from_cents(paid[m.id]),
            share=from_cents(share[m.id]),
            sent=from_cents(sent[m.id]),
            received=from_cents(received[m.id]),
            balance=from_cents(paid[m.id] - share[m.id] + sent[m.id] - received[m.id]),
        )
        for m in roster
    ]
