"""Shared fixtures for household-core tests."""

import pytest


@pytest.fixture
def household_form() -> dict[str, str]:
    """A complete monthly form as the browser submits it.

    Expected figures:
        gross 6000, deductions 1000, net 5000
        needs 2600 (52%), savings 800 (16%), wants 500 (10%), annual 150
        gross profit 1600, net profit 1100, final net income 950
    """
    return {
        "primaryIncome": "5000",
        "secondaryIncome": "1000",
        "federalIncomeTax": "800",
        "stateIncomeTax": "200",
        "housingExpenses": "1500",
        "utilities": "200",
        "foodGroceries": "600",
        "transportation": "300",
        "shortTermSavings": "300",
        "retirementSavings": "500",
        "foodEntertainment": "400",
        "subscriptionsMemberships": "100",
        "homeRepairs": "100",
        "professionalDevelopment": "50",
        "commutingTransportation": "100",
    }


@pytest.fixture
def c2e_settings() -> dict[str, dict]:
    """Housing 20% and transportation 50% are costs to earn.

    With ``household_form``: 300 + 150 toggled + 100 commuting = 550 total.
    """
    return {
        "housingExpenses": {"isC2E": True, "percentage": 20},
        "transportation": {"isC2E": True, "percentage": 50},
        "utilities": {"isC2E": False, "percentage": 100},
    }
