"""
REST client for the Kural backend.

Covers the calls the booth views need:
- voters of a booth, paginated (``/voters/by-booth/<aci>/<booth>``)
- survey forms (``/survey-forms``)
- voter info updates, used to map voters into a family (``/voters/<id>/info``)

Usage:
    client = KuralAPIClient.from_config(get_config().api)
    voters, total = client.fetch_booth_roster("119", "5")
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Optional, Sequence, Tuple

import requests

from .exceptions import APIError, ConfigurationError
from .grouping import validate_family_mapping
from .logger import get_logger
from .models import parse_int

if TYPE_CHECKING:
    from .config import APIConfig

logger = get_logger(__name__)


@dataclass
class VoterPage:
    """One page of the by-booth voter listing."""
    success: bool = False
    voters: List[dict] = field(default_factory=list)
    current_page: int = 0
    total_pages: int = 0
    total_voters: int = 0

    @classmethod
    def from_response(cls, payload: Any) -> "VoterPage":
        if not isinstance(payload, dict):
            return cls()
        pagination = payload.get("pagination") or {}
        voters = payload.get("voters")
        return cls(
            success=payload.get("success") is True,
            voters=voters if isinstance(voters, list) else [],
            current_page=parse_int(pagination.get("currentPage")),
            total_pages=parse_int(pagination.get("totalPages")),
            # Older deployments report the count as "total"
            total_voters=parse_int(pagination.get("totalVoters") or pagination.get("total")),
        )


class KuralAPIClient:
    """
    Thin wrapper over ``requests`` with bearer auth, timeouts and retries.

    Connection failures, timeouts and 5xx responses are retried with
    exponential backoff; other failures raise ``APIError`` immediately.
    """

    def __init__(
        self,
        base_url: str,
        token: Optional[str] = None,
        timeout_sec: float = 30,
        max_retries: int = 2,
        retry_delay_sec: float = 1.0,
        probe_limit: int = 50,
        fallback_limit: int = 5000,
        survey_form_limit: int = 100,
        session: Optional[requests.Session] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        base_url = (base_url or "").strip().rstrip("/")
        if not base_url:
            raise ConfigurationError("API base URL is not configured", config_key="KURAL_API_BASE_URL")

        self.base_url = base_url
        self.token = token or ""
        self.timeout_sec = timeout_sec
        self.max_retries = max(0, max_retries)
        self.retry_delay_sec = retry_delay_sec
        self.probe_limit = probe_limit
        self.fallback_limit = fallback_limit
        self.survey_form_limit = survey_form_limit
        self.session = session or requests.Session()
        self._sleep = sleep

    @classmethod
    def from_config(cls, api_config: "APIConfig", session: Optional[requests.Session] = None) -> "KuralAPIClient":
        return cls(
            base_url=api_config.get_normalized_base_url(),
            token=api_config.token,
            timeout_sec=api_config.timeout_sec,
            max_retries=api_config.max_retries,
            retry_delay_sec=api_config.retry_delay_sec,
            probe_limit=api_config.probe_limit,
            fallback_limit=api_config.fallback_limit,
            survey_form_limit=api_config.survey_form_limit,
            session=session,
        )

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def _request(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        json_body: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """
        Issue a request and decode the JSON body.

        Raises:
            APIError: Transport failure, non-2xx status or non-JSON body
        """
        url = f"{self.base_url}{path}"

        for attempt in range(self.max_retries + 1):
            is_last = attempt == self.max_retries
            try:
                response = self.session.request(
                    method,
                    url,
                    params=params,
                    json=json_body,
                    headers=self._headers(),
                    timeout=self.timeout_sec,
                )
            except (requests.ConnectionError, requests.Timeout) as e:
                if is_last:
                    raise APIError(f"{method} {path} failed: {e}", url=url) from e
                self._backoff(attempt, f"{method} {path} failed ({e})")
                continue

            if response.status_code >= 500 and not is_last:
                self._backoff(attempt, f"{method} {path} returned HTTP {response.status_code}")
                continue

            return self._decode(response, method, path, url)

        # Loop always returns or raises
        raise APIError(f"{method} {path} failed", url=url)

    def _backoff(self, attempt: int, reason: str) -> None:
        wait = self.retry_delay_sec * (2 ** attempt)
        logger.warning(
            f"{reason} (attempt {attempt + 1}/{self.max_retries + 1}), retrying in {wait:.1f}s..."
        )
        self._sleep(wait)

    @staticmethod
    def _decode(response: requests.Response, method: str, path: str, url: str) -> Any:
        text = response.text or ""
        try:
            payload = response.json()
        except ValueError:
            payload = None

        if not 200 <= response.status_code < 300:
            message = None
            if isinstance(payload, dict):
                message = payload.get("message")
            raise APIError(
                message or f"HTTP error! status: {response.status_code}",
                url=url,
                status_code=response.status_code,
                response_text=text,
            )

        if payload is None:
            raise APIError(
                f"{method} {path} returned a non-JSON body",
                url=url,
                status_code=response.status_code,
                response_text=text,
            )
        return payload

    # ------------------------------------------------------------------
    # Voters
    # ------------------------------------------------------------------

    def get_voters_page(self, aci_id: str, booth_id: str, page: int = 1, limit: int = 50) -> VoterPage:
        """Fetch one page of voters for a booth."""
        params = {
            "page": page,
            "limit": limit,
            "_": int(time.time() * 1000),  # defeat intermediate caches
        }
        payload = self._request("GET", f"/voters/by-booth/{aci_id}/{booth_id}", params=params)
        return VoterPage.from_response(payload)

    def fetch_booth_roster(self, aci_id: str, booth_id: str) -> Tuple[List[dict], int]:
        """
        Fetch the whole roster of a booth.

        A small probe page learns the server-side total, then a request
        with ``limit=total`` brings back every voter. Servers that cap the
        page size are paged through at the same limit until the roster
        reaches the total or a page comes back empty.

        Returns:
            (voters, server-reported total)
        """
        probe = self.get_voters_page(aci_id, booth_id, page=1, limit=self.probe_limit)
        if not probe.success:
            logger.warning(f"Voter listing for booth {aci_id}/{booth_id} was not successful")
            return [], 0

        total = probe.total_voters
        if total and len(probe.voters) >= total:
            logger.debug(f"Booth {aci_id}/{booth_id}: probe page already holds all {total} voters")
            return probe.voters, total

        limit = total or self.fallback_limit
        full = self.get_voters_page(aci_id, booth_id, page=1, limit=limit)
        if not full.success:
            logger.warning(f"Full roster fetch for booth {aci_id}/{booth_id} was not successful")
            return [], total

        voters = list(full.voters)
        page = 1
        while total and len(voters) < total:
            if full.total_pages and page >= full.total_pages:
                break
            page += 1
            logger.debug(f"Booth {aci_id}/{booth_id}: capped page, fetching page {page} ({len(voters)}/{total})")
            next_page = self.get_voters_page(aci_id, booth_id, page=page, limit=limit)
            if not next_page.success or not next_page.voters:
                break
            voters.extend(next_page.voters)

        if total and len(voters) < total:
            logger.warning(
                f"Booth {aci_id}/{booth_id}: server reported {total} voters but returned {len(voters)}"
            )
        logger.info(f"Loaded {len(voters)} voters for booth {aci_id}/{booth_id} in {page} page(s)")
        return voters, total or len(voters)

    def update_voter_info(self, voter_id: str, fields: Dict[str, Any]) -> Any:
        """Update editable voter info fields."""
        return self._request("PUT", f"/voters/{voter_id}/info", json_body=fields)

    def assign_family(self, family_id: str, voter_ids: Sequence[str]) -> int:
        """
        Map voters into one family by giving them the same ``familyId``.

        Returns:
            Number of voters updated
        """
        family_id = validate_family_mapping(family_id, voter_ids)
        unique_ids = list(dict.fromkeys(v for v in voter_ids if v))
        for voter_id in unique_ids:
            self.update_voter_info(voter_id, {"familyId": family_id})
        logger.info(f"Family {family_id} created with {len(unique_ids)} members")
        return len(unique_ids)

    # ------------------------------------------------------------------
    # Survey forms
    # ------------------------------------------------------------------

    def list_survey_forms(self, limit: Optional[int] = None, status: Optional[str] = None) -> List[dict]:
        """Fetch survey forms; an unsuccessful listing yields an empty list."""
        params: Dict[str, Any] = {"limit": limit or self.survey_form_limit}
        if status:
            params["status"] = status
        payload = self._request("GET", "/survey-forms", params=params)
        if not isinstance(payload, dict) or payload.get("success") is not True:
            logger.warning("Survey form listing was not successful")
            return []
        data = payload.get("data")
        return data if isinstance(data, list) else []
