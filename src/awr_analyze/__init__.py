"""Oracle AWR I/O Analyzer.

Extracts the three I/O-related tables from an AWR text report
(plain or HTML-to-text) and flags threshold breaches underneath each:

- Top 10 Foreground Events by Total Wait Time
- Wait Classes by Total Wait Time
- IO Profile
"""

__version__ = "1.0.0"
