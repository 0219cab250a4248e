"""
Booth dashboard controller.

Loads a booth roster and its survey forms, then rolls them up into the
statistics and household list the booth agent sees. Fetch failures never
escape from here: they become alert messages on the returned view and the
missing input is treated as empty, so the view shows zeros.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional, Sequence, Tuple

from .api import KuralAPIClient
from .cache import RosterCache
from .config import Config, get_config
from .exceptions import KuralError
from .grouping import HouseholdPartition, group_households, members_at_address
from .logger import get_logger
from .models import BoothStats, Household, NormalizedVoter, SurveySummary, normalize_voters
from .rollup import compute_booth_stats, count_verified_since, summarize_survey_forms
from .utils.timing import timed_operation

logger = get_logger(__name__)


@dataclass
class DashboardView:
    """Everything one booth view renders, rebuilt on every load."""
    request_id: int
    aci_id: str
    booth_id: str
    stats: BoothStats = field(default_factory=BoothStats)
    partition: HouseholdPartition = field(default_factory=HouseholdPartition)
    surveys: SurveySummary = field(default_factory=SurveySummary)
    verified_today: int = 0
    alerts: List[str] = field(default_factory=list)

    @property
    def households(self) -> List[Household]:
        return self.partition.households

    @property
    def ok(self) -> bool:
        return not self.alerts


class BoothDashboard:
    """
    View controller for a booth agent's dashboard, family and report screens.

    The API client and roster cache are injected; nothing is kept at module
    level.
    """

    def __init__(
        self,
        client: KuralAPIClient,
        cache: Optional[RosterCache] = None,
        config: Optional[Config] = None,
    ):
        self.config = config or get_config()
        self.client = client
        self.cache = cache if cache is not None else RosterCache(ttl_sec=self.config.cache.roster_ttl_sec)
        self._request_counter = 0

    @classmethod
    def from_config(cls, config: Optional[Config] = None) -> "BoothDashboard":
        config = config or get_config()
        return cls(KuralAPIClient.from_config(config.api), config=config)

    def is_current(self, view: DashboardView) -> bool:
        """False once a newer load has started; stale views should be discarded."""
        return view.request_id == self._request_counter

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def _fetch_roster(self, aci_id: str, booth_id: str) -> Tuple[List[dict], int]:
        with timed_operation(f"Fetch roster {aci_id}/{booth_id}", logger):
            voters, total = self.client.fetch_booth_roster(aci_id, booth_id)
        # An empty roster is usually a failed listing; refetch next time
        if voters:
            self.cache.put((aci_id, booth_id), (voters, total))
        return voters, total

    def _cached_roster(self, aci_id: str, booth_id: str) -> List[dict]:
        cached = self.cache.get((aci_id, booth_id))
        if cached is not None:
            return cached[0]
        voters, _ = self._fetch_roster(aci_id, booth_id)
        return voters

    def load(self, aci_id: str, booth_id: str, now: Optional[datetime] = None) -> DashboardView:
        """
        Load and roll up one booth.

        Voters are fetched before survey forms; the survey figures are
        computed over the already loaded roster.
        """
        aci_id, booth_id = str(aci_id), str(booth_id)
        self._request_counter += 1
        view = DashboardView(request_id=self._request_counter, aci_id=aci_id, booth_id=booth_id)

        voters: List[dict] = []
        total: Optional[int] = None
        try:
            voters, reported_total = self._fetch_roster(aci_id, booth_id)
            total = reported_total or None
        except KuralError as e:
            logger.warning(f"Failed to fetch voters for booth {aci_id}/{booth_id}: {e}")
            view.alerts.append(f"Failed to load voters: {e.message}")

        forms: List[dict] = []
        try:
            forms = self.client.list_survey_forms()
        except KuralError as e:
            logger.warning(f"Failed to fetch surveys: {e}")
            view.alerts.append(f"Failed to load surveys: {e.message}")

        normalized = normalize_voters(voters)
        view.partition = group_households(normalized)
        view.surveys = summarize_survey_forms(forms, booth_id)
        view.stats = compute_booth_stats(
            normalized,
            partition=view.partition,
            active_survey_forms=view.surveys.active_forms,
            total_voters=total,
        )
        view.verified_today = count_verified_since(normalized, _start_of_day(now))

        if view.partition.ungrouped:
            logger.info(
                f"Booth {aci_id}/{booth_id}: {len(view.partition.ungrouped)} voters have "
                f"no familyId and no address"
            )
        logger.info(
            f"Booth {aci_id}/{booth_id}: {view.stats.total_voters} voters, "
            f"{view.stats.total_families} families, {view.surveys.active_forms} active survey forms"
        )
        return view

    # ------------------------------------------------------------------
    # Family detail
    # ------------------------------------------------------------------

    def family_members(self, aci_id: str, booth_id: str, household_id: str) -> Optional[Household]:
        """Household by id, served from the roster cache while it is fresh."""
        voters = self._cached_roster(str(aci_id), str(booth_id))
        return group_households(voters).get(household_id)

    def address_members(self, aci_id: str, booth_id: str, address_key: str) -> List[NormalizedVoter]:
        """Voters living at ``<house>-<street>``, oldest first."""
        voters = self._cached_roster(str(aci_id), str(booth_id))
        return members_at_address(voters, address_key)

    def map_family(self, aci_id: str, booth_id: str, family_id: str, voter_ids: Sequence[str]) -> int:
        """Assign a familyId to voters and drop the booth's cached roster."""
        updated = self.client.assign_family(family_id, voter_ids)
        self.cache.invalidate((str(aci_id), str(booth_id)))
        return updated


def _start_of_day(now: Optional[datetime]) -> datetime:
    now = now or datetime.now().astimezone()
    return now.replace(hour=0, minute=0, second=0, microsecond=0)
