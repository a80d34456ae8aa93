"""Parenthesis repair for statements cut short by the line scanner."""
from __future__ import annotations


def balance_parentheses(select: str) -> str:
    """Drop surplus parentheses so the open and close counts match.

    Surplus `)` are removed starting from the right, surplus `(` starting
    from the left. Nesting is not checked, only counts.
    """
    opening = select.count("(")
    closing = select.count(")")

    if opening < closing:
        for _ in range(closing - opening):
            index = select.rindex(")")
            select = select[:index] + select[index + 1:]
    elif opening > closing:
        for _ in range(opening - closing):
            index = select.index("(")
            select = select[:index] + select[index + 1:]

    return select
