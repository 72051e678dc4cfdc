"""
Personally - Project Access Core

Decides who may open a project, where a project lives in the dashboard,
and how access failures are presented to the user.

DESIGN PRINCIPLES:
1. Checks run in a fixed order, each one a hard gate
2. Fail loudly with a typed error, classify at the boundary
3. No I/O - callers fetch project data, we only judge it
4. Every access decision can be audited
"""

__version__ = "1.0.0"
__author__ = "Personally Team"
