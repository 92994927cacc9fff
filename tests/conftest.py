import pytest

from helpers import build


@pytest.fixture
def pair():
    # 3-4-5 triangle: |AB| = 5
    return build({"A": (0, 0), "B": (3, 4)}, [("A", "B")])


@pytest.fixture
def disconnected():
    return build({"A": (0, 0), "B": (10, 0)}, [])


@pytest.fixture
def triangle():
    # B→C direct is recorded first, then beaten by B→A→C
    return build(
        {"A": (0, 0), "B": (0, 1), "C": (1, 0)},
        [("B", "A", 1.0), ("B", "C", 10.0), ("A", "C", 2.0)],
    )


@pytest.fixture
def spur():
    # D hangs off the start with nowhere to go
    return build(
        {"S": (0, 0), "D": (1, 0), "G": (5, 0)},
        [("S", "D", 1.0), ("S", "G", 5.0)],
    )


@pytest.fixture
def diamond():
    # two equal routes S-A-G and S-B-G
    return build(
        {"S": (0, 0), "A": (1, 1), "B": (1, -1), "G": (2, 0)},
        [("S", "A", 1.0), ("S", "B", 1.0), ("A", "G", 1.0), ("B", "G", 1.0)],
    )
