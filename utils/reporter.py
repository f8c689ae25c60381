from typing import Dict, Any, List, Tuple
from datetime import datetime


class RunReporter:
    """Summarize a sequence of action results"""

    SYMBOLS = {
        'success': "✓",
        'nothing_to_do': "✓",
        'failed': "✗",
        'skipped': "-",
    }

    def __init__(self):
        self.start_time = None
        self.end_time = None
        self.results: List[Tuple[Any, Any]] = []

    def set_start_time(self):
        """Record the start time of the run"""
        self.start_time = datetime.now()

    def set_end_time(self):
        """Record the end time of the run"""
        self.end_time = datetime.now()

    def add_result(self, action, result):
        self.results.append((action, result))

    def counts(self) -> Dict[str, int]:
        counts = {'success': 0, 'nothing_to_do': 0, 'failed': 0, 'skipped': 0}
        for _, result in self.results:
            counts[result.outcome.value] += 1
        return counts

    def generate_summary_report(self) -> str:
        """Generate the end-of-run summary block"""
        if not self.start_time:
            self.start_time = datetime.now()
        if not self.end_time:
            self.end_time = datetime.now()

        duration = self.end_time - self.start_time

        report_lines = []
        report_lines.append("=" * 50)
        report_lines.append("         Maintenance Report")
        report_lines.append("=" * 50)
        report_lines.append(f"Started:   {self.start_time.strftime('%Y-%m-%d %H:%M:%S')}")
        report_lines.append(f"Completed: {self.end_time.strftime('%Y-%m-%d %H:%M:%S')}")
        report_lines.append(f"Duration:  {self._format_duration(duration.total_seconds())}")
        report_lines.append("")

        for action, result in self.results:
            symbol = self.SYMBOLS[result.outcome.value]
            report_lines.append(
                f"  {symbol} {action.label}: {result.message} ({self._format_duration(result.duration)})"
            )

        counts = self.counts()
        succeeded = counts['success'] + counts['nothing_to_do']
        report_lines.append("")
        report_lines.append("-" * 50)
        report_lines.append(f"Summary: {succeeded}/{len(self.results)} actions succeeded")
        if counts['failed'] > 0:
            report_lines.append(f"Failed:  {counts['failed']} action(s) had errors")
        if counts['skipped'] > 0:
            report_lines.append(f"Skipped: {counts['skipped']} action(s)")
        report_lines.append("=" * 50)

        return "\n".join(report_lines)

    def _format_duration(self, seconds: float) -> str:
        """Format duration in a human-readable way"""
        if seconds < 60:
            return f"{seconds:.1f}s"
        elif seconds < 3600:
            minutes = int(seconds // 60)
            secs = seconds % 60
            return f"{minutes}m {secs:.0f}s"
        else:
            hours = int(seconds // 3600)
            minutes = int((seconds % 3600) // 60)
            return f"{hours}h {minutes}m"
