"""HTTP JSON API for the disk scheduling simulator.

This package provides a Flask application that runs simulations on
request.  It is an **optional** extra — install with::

    pip install py-disksched[web]

The ``create_app`` factory in ``app.py`` serves three endpoints:

- ``GET /api/algorithms`` — list the registered algorithm names.
- ``POST /api/simulate`` — run one algorithm and return its trace.
- ``POST /api/compare`` — run several algorithms on the same workload.
"""
