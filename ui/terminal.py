"""
Terminal output using Rich
Prints per-address results and the batch summary
"""
from typing import Optional

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.batch import SummaryReport
from core.eligibility import EligibilityOutcome


def format_amount(amount: float) -> str:
    return f"{amount:.6f}" if amount > 0 else "0"


class TerminalReporter:
    """Rich-based reporter for eligibility results"""
    
    def __init__(self, console: Optional[Console] = None, token_symbol: str = "GPU"):
        self.console = console or Console()
        self.token_symbol = token_symbol
    
    def result_line(self, outcome: EligibilityOutcome, index: Optional[int] = None) -> Text:
        """Build the one-line rendering of an outcome"""
        line = Text()
        if index:
            line.append(f"{index}. ", style="dim")
        
        if outcome.error:
            line.append("❌ Error", style="bold red")
            line.append(f" - {outcome.address} - ")
            line.append(outcome.error, style="red")
            return line
        
        if outcome.is_eligible:
            line.append("✅ Eligible", style="bold green")
        else:
            line.append("❌ Not Eligible", style="bold yellow")
        line.append(f" - {outcome.address} - ")
        line.append(f"{format_amount(outcome.amount)} {self.token_symbol}", style="cyan")
        return line
    
    def print_result(self, outcome: EligibilityOutcome, index: Optional[int] = None):
        self.console.print(self.result_line(outcome, index))
    
    def print_header(self, title: str):
        self.console.print(Panel(Text(title, style="bold cyan"), border_style="blue"))
    
    def print_summary(self, summary: SummaryReport):
        """Print the batch summary"""
        table = Table(show_header=False, border_style="dim", box=None)
        table.add_column("Metric", style="bold")
        table.add_column("Value", justify="right")
        
        table.add_row("Total Addresses Checked", str(summary.total))
        table.add_row("✅ Eligible", Text(str(summary.eligible), style="green"))
        table.add_row("❌ Not Eligible", Text(str(summary.not_eligible), style="yellow"))
        table.add_row("⚠️  Errors", Text(str(summary.errors), style="red"))
        table.add_row(
            "💰 Total Amount",
            Text(f"{summary.total_amount:.6f} {self.token_symbol}", style="bold cyan")
        )
        
        self.console.print()
        self.console.print(Panel(table, title="SUMMARY", border_style="blue"))
