"""
Spending overview report for a parsed statement.
"""
from decimal import Decimal
from rich.console import Console
from rich.table import Table

from ..models.schema import Statement, StatementProfile, UNKNOWN_CATEGORY


def spend_share(net: Decimal, total_debits: Decimal) -> Decimal:
    """Percentage of all debits a category's net spend represents, floored at 0."""
    if total_debits == 0:
        return Decimal('0')
    return max(net / total_debits * 100, Decimal('0'))


def render_overview(statement: Statement, profile: StatementProfile, console: Console):
    """
    Print totals, per-category spend and the per-category breakdown.

    Args:
        statement: Parsed statement
        profile: Profile providing the currency and conversion rates
        console: Rich console to print to
    """
    overview = sorted(statement.calculate_category_overview(), key=lambda c: c.name)

    console.print(f"\n[bold]{profile.bank} Credit Card Statement[/bold]\n")
    console.print(f"Transactions:     {len(statement.credits) + len(statement.debits)}")
    console.print(f"Total Debits:     {statement.total_debits}")
    console.print(f"Total Credits:    {statement.total_credits}\n")

    spend = Table(title="Spend by category")
    spend.add_column("Category")
    spend.add_column(profile.currency, justify="right")
    for code in profile.conversions:
        spend.add_column(code, justify="right")

    for category in overview:
        if category.name == UNKNOWN_CATEGORY:
            continue
        net = category.debits - category.credits
        converted = [f"{net * rate:.2f}" for rate in profile.conversions.values()]
        spend.add_row(category.name.lower(), str(net), *converted)
    console.print(spend)

    for category in overview:
        share = spend_share(category.debits - category.credits, statement.total_debits)
        breakdown = Table(title=f"{category.name} ({share:.0f}% of all spend)", show_header=False)
        breakdown.add_column("Amount", justify="right")
        breakdown.add_column("Details")

        transactions = sorted(statement.get_debits_for_category(category.name),
                              key=lambda t: t.amount, reverse=True)
        for transaction in transactions:
            breakdown.add_row(str(transaction.amount), transaction.details)
        console.print(breakdown)
