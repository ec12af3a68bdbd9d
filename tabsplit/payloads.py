# tabsplit/payloads.py
"""Turn request JSON into engine objects."""
from .exceptions import InvalidPayloadError
from .models import Equal, Expense, Member, Payment, Percentage, Unequal


def _require(item, key, where):
    if not isinstance(item, dict):
        raise InvalidPayloadError(f"{where} must be an object")
    if key not in item or item[key] in (None, ""):
        raise InvalidPayloadError(f"{where} is missing '{key}'")
    return item[key]


def _list_of(data, key, required=True):
    value = data.get(key)
    if value is None:
        if required:
            raise InvalidPayloadError(f"'{key}' is required")
        return []
    if not isinstance(value, list):
        raise InvalidPayloadError(f"'{key}' must be a list")
    return value


def parse_member(item, index=0):
    if isinstance(item, (str, int)) and not isinstance(item, bool):
        return Member(id=item, name=str(item))
    member_id = _require(item, "id", f"members[{index}]")
    return Member(id=member_id, name=item.get("name") or str(member_id))


def parse_split(raw, where):
    if raw is None:
        return Equal()
    if not isinstance(raw, dict):
        raise InvalidPayloadError(f"{where} must be an object")

    kind = raw.get("type", "equal")
    if kind == "equal":
        participants = raw.get("participants")
        if participants is not None and not isinstance(participants, list):
            raise InvalidPayloadError(f"{where}.participants must be a list")
        return Equal(None if participants is None else tuple(participants))
    if kind in ("unequal", "custom"):
        shares = _require(raw, "shares", where)
        if not isinstance(shares, dict):
            raise InvalidPayloadError(f"{where}.shares must be an object")
        return Unequal(shares)
    if kind == "percentage":
        percentages = _require(raw, "percentages", where)
        if not isinstance(percentages, dict):
            raise InvalidPayloadError(f"{where}.percentages must be an object")
        return Percentage(percentages)
    raise InvalidPayloadError(f"{where}.type must be equal, unequal or percentage, got {kind!r}")


def parse_expense(item, index=0):
    where = f"expenses[{index}]"
    amount = _require(item, "amount", where)
    paid_by = _require(item, "paid_by", where)
    return Expense(
        amount=amount,
        paid_by=paid_by,
        split=parse_split(item.get("split"), f"{where}.split"),
        id=item.get("id"),
        description=item.get("description") or "",
    )


def parse_payment(item, index=0):
    where = f"payments[{index}]"
    return Payment(
        from_member=_require(item, "from", where),
        to_member=_require(item, "to", where),
        amount=_require(item, "amount", where),
    )


def parse_group(data):
    """Return ``(members, expenses, payments)`` from a group snapshot."""
    if not isinstance(data, dict):
        raise InvalidPayloadError("Request body must be a JSON object")
    members = [parse_member(m, i) for i, m in enumerate(_list_of(data, "members"))]
    if not members:
        raise InvalidPayloadError("'members' must not be empty")
    expenses = [parse_expense(e, i) for i, e in enumerate(_list_of(data, "expenses", required=False))]
    payments = [parse_payment(p, i) for i, p in enumerate(_list_of(data, "payments", required=False))]
    return members, expenses, payments


def parse_legacy_expenses(data):
    """
    The original /api/calculate body: ``[{payer, amount, involved}, ...]``.

    Each row is an equal split among ``involved``. Members are everyone seen,
    in order of first appearance.
    """
    if not isinstance(data, list):
        raise InvalidPayloadError("Request body must be a JSON list of expenses")

    members = {}
    expenses = []
    for index, item in enumerate(data):
        where = f"[{index}]"
        payer = _require(item, "payer", where)
        involved = item.get("involved") or []
        if not isinstance(involved, list):
            raise InvalidPayloadError(f"{where}.involved must be a list")
        for person in [payer] + involved:
            members.setdefault(person, Member(id=person, name=str(person)))
        expenses.append(Expense(_require(item, "amount", where), payer, Equal(tuple(involved))))
    return list(members.values()), expenses
