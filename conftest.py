#  ___________________________________________________________________________
#
#  Pyomo: Python Optimization Modeling Objects
#  Copyright (c) 2008-2025
#  National Technology and Engineering Solutions of Sandia, LLC
#  Under the terms of Contract DE-NA0003525 with National Technology and
#  Engineering Solutions of Sandia, LLC, the U.S. Government retains certain
#  rights in this software.
#  This software is distributed under the 3-clause BSD License.
#  ___________________________________________________________________________

import pytest

_implicit_markers = {'default'}
_extended_implicit_markers = _implicit_markers.union({'solver'})


def pytest_collection_modifyitems(items):
    """Mark every unmarked test with the implicit 'default' marker"""
    for item in items:
        try:
            next(item.iter_markers())
        except StopIteration:
            for marker in _implicit_markers:
                item.add_marker(getattr(pytest.mark, marker))


def pytest_runtest_setup(item):
    """
    Decide whether a marked test runs.

    With ``--solver NAME`` only tests marked ``solver(NAME)`` run.  With
    ``-m`` pytest's own marker selection applies.  Otherwise unmarked,
    default and solver tests run, and tests carrying any other marker
    (e.g., "expensive") are skipped.
    """
    solvernames = [mark.args[0] for mark in item.iter_markers(name="solver")]
    solveroption = item.config.getoption("--solver")
    markeroption = item.config.getoption("-m")
    item_markers = set(mark.name for mark in item.iter_markers())
    if solveroption:
        if solveroption not in solvernames:
            pytest.skip("SKIPPED: Test not marked {!r}".format(solveroption))
    elif markeroption:
        return
    elif item_markers:
        if not _implicit_markers.issubset(item_markers) and not item_markers.issubset(
            _extended_implicit_markers
        ):
            pytest.skip('SKIPPED: Only running default, solver, and unmarked tests.')


def pytest_addoption(parser):
    parser.addoption(
        "--solver",
        action="store",
        metavar="SOLVER",
        help="Only run the tests that need the requested SOLVER.",
    )


def pytest_configure(config):
    # Registering the marker keeps pytest from warning about it
    config.addinivalue_line(
        "markers", "solver(name): mark a test that needs the named solver"
    )
