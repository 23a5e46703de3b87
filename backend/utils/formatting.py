from decimal import Decimal, ROUND_HALF_UP

CENTS = Decimal("0.01")


def to_money(amount) -> Decimal:
    """Quantize any numeric value to two decimals."""
    if amount is None:
        return Decimal("0.00")
    return Decimal(str(amount)).quantize(CENTS, rounding=ROUND_HALF_UP)


def format_amount(amount) -> str:
    """Render an amount with exactly two decimals, e.g. 119 -> "119.00"."""
    return f"{to_money(amount):.2f}"


# Status names are free text in the reference table (mostly Spanish); the
# color tag is display sugar derived from them.
_STATUS_COLORS = (
    (("pagad", "paid", "complet"), "success"),
    (("pend",), "warning"),
    (("anul", "cancel", "rechaz", "vencid", "overdue"), "danger"),
)


def status_color(status_name) -> str:
    name = (status_name or "").lower()
    for needles, color in _STATUS_COLORS:
        if any(needle in name for needle in needles):
            return color
    return "secondary"


def settlement_status(amount_total, total_paid) -> str:
    total = to_money(amount_total)
    paid = to_money(total_paid)
    if paid >= total:
        return "paid"
    if paid > 0:
        return "partial"
    return "unpaid"
