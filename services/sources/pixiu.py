from typing import Any, Dict

from packages.db import connect, fetch_all, fetch_one
from services.views.periods import month_date_range, year_date_range

SOURCE = "pixiu"

TX_COLUMNS = """
    id, source, tx_date, category_l1, category_l2,
    inflow, outflow, currency, account, tags, note, year
"""
AGG_COLUMNS = "income, expense, net, tx_count"


class PixiuSource:
    name = "pixiu"

    def get_day_data(self, date: str) -> Dict[str, Any]:
        with connect(self.name) as conn:
            # tx_date is "YYYY-MM-DD HH:mm"
            transactions = fetch_all(
                conn,
                f"SELECT {TX_COLUMNS} FROM pixiu_transaction WHERE source = ? AND tx_date LIKE ? ORDER BY tx_date",
                (SOURCE, f"{date}%"),
            )
            day_agg = fetch_one(
                conn,
                f"SELECT source, day, {AGG_COLUMNS} FROM pixiu_day_agg WHERE source = ? AND day = ?",
                (SOURCE, date),
            )
        return {"date": date, "transactions": transactions, "day_agg": day_agg}

    def get_month_data(self, month: str) -> Dict[str, Any]:
        start, end = month_date_range(month)
        with connect(self.name) as conn:
            transactions = fetch_all(
                conn,
                f"""
                SELECT {TX_COLUMNS}
                FROM pixiu_transaction
                WHERE source = ? AND tx_date >= ? AND tx_date <= ?
                ORDER BY tx_date
                """,
                (SOURCE, start, f"{end} 23:59"),
            )
            day_aggs = fetch_all(
                conn,
                f"""
                SELECT source, day, {AGG_COLUMNS}
                FROM pixiu_day_agg
                WHERE source = ? AND day >= ? AND day <= ?
                ORDER BY day
                """,
                (SOURCE, start, end),
            )
            month_agg = fetch_one(
                conn,
                f"SELECT source, month, {AGG_COLUMNS} FROM pixiu_month_agg WHERE source = ? AND month = ?",
                (SOURCE, month),
            )
        return {"month": month, "transactions": transactions, "day_aggs": day_aggs, "month_agg": month_agg}

    def get_year_data(self, year: int) -> Dict[str, Any]:
        start, end = year_date_range(year)
        with connect(self.name) as conn:
            transactions = fetch_all(
                conn,
                f"SELECT {TX_COLUMNS} FROM pixiu_transaction WHERE source = ? AND year = ? ORDER BY tx_date",
                (SOURCE, year),
            )
            day_aggs = fetch_all(
                conn,
                f"""
                SELECT source, day, {AGG_COLUMNS}
                FROM pixiu_day_agg
                WHERE source = ? AND day >= ? AND day <= ?
                ORDER BY day
                """,
                (SOURCE, start, end),
            )
            month_aggs = fetch_all(
                conn,
                f"""
                SELECT source, month, {AGG_COLUMNS}
                FROM pixiu_month_agg
                WHERE source = ? AND month >= ? AND month <= ?
                ORDER BY month
                """,
                (SOURCE, f"{year}-01", f"{year}-12"),
            )
            year_agg = fetch_one(
                conn,
                f"SELECT source, year, {AGG_COLUMNS} FROM pixiu_year_agg WHERE source = ? AND year = ?",
                (SOURCE, year),
            )
        return {
            "year": year,
            "transactions": transactions,
            "day_aggs": day_aggs,
            "month_aggs": month_aggs,
            "year_agg": year_agg,
        }
