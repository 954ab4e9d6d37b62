"""Pytest fixtures for awr-io-analyze tests."""

from pathlib import Path

import pytest

from awr_analyze.models import ThresholdSet

# A trimmed AWR text report: menu noise, the three target tables, and
# unrelated sections around them.
SAMPLE_REPORT = """\
WORKLOAD REPOSITORY report for

DB Name         DB Id    Instance     Inst Num Startup Time    Release     RAC
------------ ----------- ------------ -------- --------------- ----------- ---
ORCL          1234567890 orcl                1 01-Jan-25 00:00 19.0.0.0.0  NO

Main Report
- Report Summary
- Wait Events Statistics
- SQL Statistics

Report Summary

Top 10 Foreground Events by Total Wait Time

                                           Total Wait       Wait   % DB Wait
Event                                Waits Time (sec)    Avg(ms)   time Class
------------------------------ ----------- ---------- ---------- ------ --------
DB CPU                                          1,234.5               45.2
db file sequential read          1,234,567    2,222.2      1.80ms   25.1 User I/O
log file sync                      232,142    2,151.6      9.27ms    7.0 Commit
enq: TX - row lock contention       12,345      150.3     45.12ms    4.5 Application
gc cr block busy                     5,432       80.1    212.99us    2.5 Cluster
buffer busy waits                    3,210       40.0     12.46ms    1.2 Concurrency
direct path write temp               2,000       30.0     15.00ms    1.1 User I/O

Wait Classes by Total Wait Time

                                                        Avg             Avg
                                        Total Wait     Wait   % DB   Active
Wait Class                  Waits       Time (sec)     (ms)   time Sessions
---------------- ---------------- ---------------- -------- ------ --------
            3,456,789         4,567.8      1.32    38.4 User I/O
              232,500         2,160.0      9.29     7.0 Commit
               45,000           400.0      8.89     4.2 Concurrency
                              3,000.0              25.2 DB CPU

Host CPU:
CPUs Cores Sockets Load Average Begin Load Average End
---- ----- ------- ------------------ ----------------
  16     8       2               1.20             1.35

IO Profile                  Read+Write/Second     Read/Second    Write/Second
~~~~~~~~~~                  ----------------- --------------- ---------------
            Total Requests:          12,345.6         3,000.0         9,345.6
         Database Requests:          11,000.0         2,900.0         8,100.0
                 Read Reqs:           3,000.0
                Write Reqs:           9,345.6
                 Read (MB):               0.3
                Write (MB):               0.5

Instance Activity Statistics

Statistic                                     Total     per Second
------------------------------------ -------------- --------------
user commits                                232,500          64.6

Back to Top
"""


@pytest.fixture
def report_lines() -> list[str]:
    """The sample report split into lines."""
    return SAMPLE_REPORT.splitlines()


@pytest.fixture
def report_file(tmp_path: Path) -> Path:
    """The sample report written to disk."""
    path = tmp_path / "awrrpt_1_100_101.txt"
    path.write_text(SAMPLE_REPORT, encoding="utf-8")
    return path


@pytest.fixture
def default_thresholds() -> ThresholdSet:
    return ThresholdSet()
