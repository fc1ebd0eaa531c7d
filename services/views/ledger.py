"""Expense ledger (pixiu) breakdowns shared by the day, month and year views."""
from typing import Any, Dict, Iterable, List, Optional


def _amount(row: Dict[str, Any], income: bool) -> float:
    return float(row.get("inflow" if income else "outflow") or 0)


def category_breakdown(transactions: Iterable[Dict[str, Any]], income: bool) -> List[Dict[str, Any]]:
    """Totals per level-2 category, largest first, with each category's share of the total."""
    totals: Dict[str, Dict[str, Any]] = {}
    grand_total = 0.0
    for tx in transactions:
        amount = _amount(tx, income)
        if amount <= 0:
            continue
        grand_total += amount
        entry = totals.setdefault(tx.get("category_l2") or "", {"amount": 0.0, "count": 0})
        entry["amount"] += amount
        entry["count"] += 1
    rows = [
        {
            "category": category,
            "amount": data["amount"],
            "count": data["count"],
            "percentage": (data["amount"] / grand_total * 100) if grand_total > 0 else 0,
        }
        for category, data in totals.items()
    ]
    return sorted(rows, key=lambda r: r["amount"], reverse=True)


def account_breakdown(transactions: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
    accounts: Dict[str, Dict[str, Any]] = {}
    total_expense = 0.0
    for tx in transactions:
        inflow = _amount(tx, True)
        outflow = _amount(tx, False)
        total_expense += outflow
        entry = accounts.setdefault(tx.get("account") or "", {"income": 0.0, "expense": 0.0, "count": 0})
        entry["income"] += inflow
        entry["expense"] += outflow
        entry["count"] += 1
    rows = [
        {
            "account": account,
            "income": data["income"],
            "expense": data["expense"],
            "net": data["income"] - data["expense"],
            "transaction_count": data["count"],
            "percentage": (data["expense"] / total_expense * 100) if total_expense > 0 else 0,
        }
        for account, data in accounts.items()
    ]
    return sorted(rows, key=lambda r: r["expense"], reverse=True)


def totals_from_transactions(transactions: List[Dict[str, Any]]) -> Dict[str, Any]:
    income = sum(_amount(tx, True) for tx in transactions)
    expense = sum(_amount(tx, False) for tx in transactions)
    return {"income": income, "expense": expense, "net": income - expense, "transaction_count": len(transactions)}


def totals_from_agg(agg: Optional[Dict[str, Any]], transactions: List[Dict[str, Any]]) -> Dict[str, Any]:
    """Prefer the importer's aggregate row; fall back to summing transactions."""
    if agg:
        return {
            "income": agg.get("income") or 0,
            "expense": agg.get("expense") or 0,
            "net": agg.get("net") or 0,
            "transaction_count": agg.get("tx_count") or 0,
        }
    return totals_from_transactions(transactions)
