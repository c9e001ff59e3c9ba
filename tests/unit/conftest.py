"""
Shared fixtures for unit tests.

This module provides common fixtures used across multiple test modules:
- Compensation configs (default plan and a two-level plan)
- CompensationEngine instances
- Small downline trees
"""

from decimal import Decimal

import pytest

from compensation import (
    DEFAULT_CONFIG,
    CompensationConfig,
    CompensationEngine,
    NetworkNode,
)


@pytest.fixture
def engine() -> CompensationEngine:
    """
    Create engine with the default plan.

    Default plan:
    - direct: 20%
    - levels: 10%, 7%, 5%, 3%, 2%
    - matching: 10%, leadership: 2%
    - ranks: bronze, silver, gold, platinum, diamond
    """
    return CompensationEngine(DEFAULT_CONFIG)


@pytest.fixture
def two_level_config() -> CompensationConfig:
    """Plan with two commission levels and a two-rank ladder."""
    return CompensationConfig(
        direct_commission_rate=Decimal("0.20"),
        level_commission_rates=[Decimal("0.10"), Decimal("0.07")],
        matching_bonus_rate=Decimal("0.10"),
        rank_requirements={
            "bronze": {"personalPV": 100, "groupPV": 1000, "directReferrals": 2},
            "silver": {"personalPV": 200, "groupPV": 5000, "directReferrals": 4},
        },
    )


@pytest.fixture
def two_level_engine(two_level_config: CompensationConfig) -> CompensationEngine:
    """Create engine with the two-level plan."""
    return CompensationEngine(two_level_config)


def make_node(node_id: str, *children: NetworkNode, **fields) -> NetworkNode:
    """Build a node with the given children."""
    return NetworkNode(id=node_id, children=list(children), **fields)


@pytest.fixture
def sample_tree() -> NetworkNode:
    """
    Create a small downline:

        root
        ├── alice (active, 2000 sales)
        │   ├── emily (inactive, 150 sales)
        │   └── michael (active, 200 sales)
        └── bob (active, 1200 sales)
            └── sarah (inactive, no sales)
    """
    return make_node(
        "root",
        make_node(
            "alice",
            make_node("emily", username="Emily Brown", total_sales=Decimal("150")),
            make_node(
                "michael",
                username="Michael Wilson",
                is_active=True,
                total_sales=Decimal("200"),
            ),
            username="Alice Smith",
            is_active=True,
            total_sales=Decimal("2000"),
            rank="silver",
        ),
        make_node(
            "bob",
            make_node("sarah", username="Sarah Davis"),
            username="Bob Johnson",
            is_active=True,
            total_sales=Decimal("1200"),
        ),
        username="John Doe",
        is_active=True,
    )


@pytest.fixture
def node_factory():
    """Return the make_node helper for building trees inside tests."""
    return make_node
