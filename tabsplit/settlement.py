# tabsplit/settlement.py
import logging
from collections import namedtuple

from .balances import compute_balances
from .exceptions import UnbalancedLedgerError
from .models import Settlement
from .money import DEFAULT_TOLERANCE, from_cents, to_cents, to_decimal

logger = logging.getLogger(__name__)

GroupSettlement = namedtuple("GroupSettlement", ["balances", "settlements"])


def calculate_settlements(balances, *, tolerance=DEFAULT_TOLERANCE, strict=True):
    """
    Reduce a balance map to a short list of transfers that zeroes it out.

    Greedy: the largest debtor pays the largest creditor as much as either
    can absorb, then whoever is done drops out. Ties are broken by member id
    so the same balances always give the same list.
    """
    tolerance = to_decimal(tolerance)
    threshold = to_cents(tolerance)

    # 1. Check the ledger actually nets out
    total = sum((to_decimal(v) for v in balances.values()), to_decimal(0))
    if abs(total) >= tolerance:
        if strict:
            raise UnbalancedLedgerError(total)
        logger.warning("Balances sum to %s; part of the debt will stay unsettled", total)

    # 2. Separate Debtors and Creditors
    debtors = []
    creditors = []

    for person, amount in balances.items():
        net = to_cents(amount)
        if abs(net) < threshold:
            continue
        if net < 0: debtors.append([person, net])
        if net > 0: creditors.append([person, net])

    debtors.sort(key=lambda x: (x[1], x[0]))
    creditors.sort(key=lambda x: (-x[1], x[0]))

    # 3. Match them up
    settlements = []
    i = 0
    j = 0

    while i < len(debtors) and j < len(creditors):
        debtor = debtors[i]
        creditor = creditors[j]

        amount = min(-debtor[1], creditor[1])
        if amount > 0:
            settlements.append(Settlement(debtor[0], creditor[0], from_cents(amount)))

        debtor[1] += amount
        creditor[1] -= amount

        if abs(debtor[1]) < max(threshold, 1): i += 1
        if abs(creditor[1]) < max(threshold, 1): j += 1

    logger.debug("Reduced %d debtors and %d creditors to %d settlements",
                 len(debtors), len(creditors), len(settlements))
    return settlements


def apply_settlements(balances, settlements):
    """Balances after every settlement has been paid. The input is left untouched."""
    after = {person: to_decimal(amount) for person, amount in balances.items()}
    for s in settlements:
        after[s.from_member] = after.get(s.from_member, 0) + s.amount
        after[s.to_member] = after.get(s.to_member, 0) - s.amount
    return after


def settle_group(members, expenses, payments=(), *, tolerance=DEFAULT_TOLERANCE, strict=True):
    balances = compute_balances(members, expenses, payments, tolerance=tolerance, strict=strict)
    settlements = calculate_settlements(balances, tolerance=tolerance, strict=strict)
    return GroupSettlement(balances, settlements)
