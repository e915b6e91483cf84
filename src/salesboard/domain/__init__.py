"""Domain layer for salesboard application."""

# Services import the database layer, which imports domain.entities; resolve
# them lazily so importing either package first never hits a partial module.
_SERVICES = {
    "AgentService": "salesboard.domain.agent",
    "TeamService": "salesboard.domain.team",
    "SaleService": "salesboard.domain.sale",
    "CategoryService": "salesboard.domain.category",
    "CycleResetEngine": "salesboard.domain.cycle_reset",
    "DashboardService": "salesboard.domain.dashboard",
    "SettingsService": "salesboard.domain.settings",
}

__all__ = list(_SERVICES)


def __getattr__(name):
    if name in _SERVICES:
        import importlib

        return getattr(importlib.import_module(_SERVICES[name]), name)
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
