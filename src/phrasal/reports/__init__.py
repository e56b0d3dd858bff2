from phrasal.reports.console import ConsoleReporter


__all__ = ["ConsoleReporter"]
