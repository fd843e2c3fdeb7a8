"""
Sync engine services.

- ReconciliationEngine: make one family's cache equal to the remote snapshot
- IdentityRemapper: assign canonical ids after a session is first accepted
- RetryCoordinator: in-flight guard and a single delayed retry per pass
- SyncScheduler: staleness checks, explicit and periodic triggers
- PersonalBestDeriver: refresh personal bests after a session upload

Usage:
    from application.sync import ReconciliationEngine, SessionFamily

    engine = ReconciliationEngine(SessionFamily(remote, store, remapper, lookup), store)
    result = await engine.reconcile(context)
"""

from application.sync.families import (
    CatalogFamily,
    FamilyAdapter,
    PersonalBestFamily,
    SessionFamily,
    TemplateFamily,
)
from application.sync.identity_remapper import IdentityRemapper
from application.sync.personal_bests import PersonalBestDeriver
from application.sync.reconciliation import ReconciliationEngine
from application.sync.results import PushResult, ReconcileResult, RunOutcome, RunStatus
from application.sync.retry import RetryCoordinator
from application.sync.scheduler import DEFAULT_THRESHOLDS, SyncScheduler, Ticker

__all__ = [
    # Families
    "FamilyAdapter",
    "SessionFamily",
    "TemplateFamily",
    "PersonalBestFamily",
    "CatalogFamily",
    # Services
    "ReconciliationEngine",
    "IdentityRemapper",
    "RetryCoordinator",
    "SyncScheduler",
    "Ticker",
    "PersonalBestDeriver",
    "DEFAULT_THRESHOLDS",
    # Results
    "PushResult",
    "ReconcileResult",
    "RunOutcome",
    "RunStatus",
]
