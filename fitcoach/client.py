"""Minimal REST client for the FitCoach API.

The auth token lives on an ``ApiSession`` the caller creates and passes to
every function; there is no module-level state.

Env vars:
  - FITCOACH_BASE_URL (optional; default: http://localhost:5000)
"""
import logging
import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import requests


log = logging.getLogger(__name__)


class ApiError(Exception):
    def __init__(self, status_code: int, message: str):
        self.status_code = status_code
        self.message = message
        super().__init__(f"{status_code}: {message}")


@dataclass
class ApiSession:
    base_url: str = field(default_factory=lambda: os.getenv("FITCOACH_BASE_URL", "http://localhost:5000"))
    token: Optional[str] = None
    user: Optional[Dict[str, Any]] = None
    timeout: float = 10
    http: requests.Session = field(default_factory=requests.Session)

    def _headers(self) -> Dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def request(self, method: str, path: str, **kwargs) -> Any:
        url = f"{self.base_url.rstrip('/')}{path}"
        r = self.http.request(method, url, headers=self._headers(), timeout=self.timeout, **kwargs)
        if r.status_code >= 400:
            try:
                message = r.json().get("error", r.reason)
            except ValueError:
                message = r.reason
            log.warning("%s %s failed: %s %s", method, path, r.status_code, message)
            raise ApiError(r.status_code, message)
        return r.json() if r.content else None


def _params(**kwargs) -> Dict[str, str]:
    return {k: v for k, v in kwargs.items() if v is not None}


# --- Auth ---

def login(session: ApiSession, email: str, password: str) -> Dict[str, Any]:
    data = session.request("POST", "/api/auth/login", json={"email": email, "password": password})
    session.token = data["token"]
    session.user = data["user"]
    return data["user"]


def register(session: ApiSession, email: str, password: str, name: str) -> Dict[str, Any]:
    data = session.request("POST", "/api/auth/register", json={"email": email, "password": password, "name": name})
    session.token = data["token"]
    session.user = data["user"]
    return data["user"]


def logout(session: ApiSession) -> None:
    session.token = None
    session.user = None


def get_me(session: ApiSession) -> Optional[Dict[str, Any]]:
    if not session.token:
        return None
    return session.request("GET", "/api/auth/me")


# --- Availability ---

def get_locations(session: ApiSession, include_inactive: bool = False) -> List[dict]:
    params = {"includeInactive": "true"} if include_inactive else None
    return session.request("GET", "/api/locations", params=params)


def get_availability(session: ApiSession, date: Optional[str] = None, branch_id: Optional[str] = None) -> List[dict]:
    return session.request("GET", "/api/availability", params=_params(date=date, branchId=branch_id))


def get_available_slots(session: ApiSession, date: str, branch_id: Optional[str] = None) -> List[dict]:
    return session.request("GET", "/api/availability/slots", params=_params(date=date, branchId=branch_id))


def get_available_dates(session: ApiSession, branch_id: Optional[str] = None) -> List[str]:
    return session.request("GET", "/api/availability/dates", params=_params(branchId=branch_id))


def create_availability_block(session: ApiSession, date: str, start_time: str, end_time: str, branch_id: str) -> dict:
    body = {"date": date, "startTime": start_time, "endTime": end_time, "branchId": branch_id}
    return session.request("POST", "/api/availability", json=body)


def delete_availability_block(session: ApiSession, block_id: str) -> None:
    session.request("DELETE", f"/api/availability/{block_id}")


# --- Bookings ---

def get_bookings(session: ApiSession, date: Optional[str] = None, user_id: Optional[str] = None) -> List[dict]:
    return session.request("GET", "/api/bookings", params=_params(date=date, userId=user_id))


def create_booking(
    session: ApiSession,
    date: str,
    start_time: str,
    branch_id: str,
    branch_name: str = "",
    manual_client_name: Optional[str] = None,
) -> dict:
    body = {"date": date, "startTime": start_time, "branchId": branch_id, "branchName": branch_name}
    if manual_client_name:
        body["manualClientName"] = manual_client_name
    return session.request("POST", "/api/bookings", json=body)


def delete_booking(session: ApiSession, booking_id: str) -> None:
    session.request("DELETE", f"/api/bookings/{booking_id}")
