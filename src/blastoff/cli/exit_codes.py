"""Process exit statuses returned by ``blastoff``.

A run that scored every level exits 0. Bad options, a bad seed or an
unreadable config exit 2 before any work starts. Failures during the run
(missing aligner, malformed hits, empty reference) exit 1. Interrupted
runs exit with the usual 128 + signal number.
"""

EXIT_SUCCESS = 0
EXIT_ERROR = 1  # run started but did not finish cleanly
EXIT_USAGE = 2  # rejected before the run
EXIT_SIGINT = 130
EXIT_SIGTERM = 143
