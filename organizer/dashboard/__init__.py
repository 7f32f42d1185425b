"""
Dashboard module for Smart Student Organizer.

Provides priority scoring, smart alert derivation, stats aggregation
and CLI formatting.
"""

from .prioritizer import (
    Prioritizer,
    ScoredTask,
    calculate_priority,
    calculate_urgency_bonus,
    calculate_importance_bonus,
    days_until_due,
)
from .alerts import (
    Alert,
    AlertPriority,
    AlertType,
    derive_alerts,
    group_alerts,
)
from .aggregator import (
    DashboardAggregator,
    DashboardData,
)
from .formatter import DashboardFormatter

__all__ = [
    # Prioritizer
    'Prioritizer',
    'ScoredTask',
    'calculate_priority',
    'calculate_urgency_bonus',
    'calculate_importance_bonus',
    'days_until_due',
    # Alerts
    'Alert',
    'AlertPriority',
    'AlertType',
    'derive_alerts',
    'group_alerts',
    # Aggregator
    'DashboardAggregator',
    'DashboardData',
    # Formatter
    'DashboardFormatter',
]
