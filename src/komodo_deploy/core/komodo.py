#!/usr/bin/env python3
"""
Komodo API client.

Thin synchronous client for the Komodo core API. Requests are POSTed as
``{"type": ..., "params": ...}`` to the ``/read`` and ``/execute`` routes and
authenticated with an API key/secret pair. Execution requests return an
Update (or, for batch requests, a list of per-item results) which can be
polled until Komodo reports it complete.

Copyright (c) Advanced Micro Devices, Inc. All rights reserved.
"""

import logging
import time
from typing import Any, Dict, List, Optional, Union

import requests

from komodo_deploy.core.errors import PollTimeoutError, RemoteOperationError

logger = logging.getLogger(__name__)

UPDATE_STATUS_COMPLETE = "Complete"
BATCH_ITEM_OK = "Ok"
BATCH_ITEM_ERR = "Err"

ExecutionResult = Union[Dict[str, Any], List[Dict[str, Any]]]


def update_id(update: Dict[str, Any]) -> Optional[str]:
    """Extract the Mongo object id of an Update, if present."""
    raw_id = update.get("_id")
    if isinstance(raw_id, dict):
        oid = raw_id.get("$oid")
        return oid if isinstance(oid, str) else None
    return None


class KomodoClient:
    """
    Client for the Komodo core API.

    Polling has no deadline unless ``poll_timeout`` is set; a stuck update
    blocks the caller.
    """

    def __init__(
        self,
        url: str,
        api_key: str,
        api_secret: str,
        poll_interval: float = 1.0,
        poll_timeout: Optional[float] = None,
        request_timeout: float = 30.0,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize the client.

        Args:
            url: Base URL of the Komodo core, e.g. ``https://komodo.example.com``
            api_key: API key sent as ``X-Api-Key``
            api_secret: API secret sent as ``X-Api-Secret``
            poll_interval: Seconds between GetUpdate reads
            poll_timeout: Maximum seconds to wait for one update, None for no limit
            request_timeout: Per-request HTTP timeout in seconds
            session: Optional preconfigured requests session
        """
        self.url = url.rstrip("/")
        self.poll_interval = poll_interval
        self.poll_timeout = poll_timeout
        self.request_timeout = request_timeout
        self._owns_session = session is None
        self.session = session or requests.Session()
        self.session.headers.update(
            {
                "Content-Type": "application/json",
                "X-Api-Key": api_key,
                "X-Api-Secret": api_secret,
            }
        )

    def close(self) -> None:
        """Release the HTTP session, unless it was supplied by the caller."""
        if self._owns_session:
            self.session.close()

    def __enter__(self) -> "KomodoClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _request(self, route: str, request_type: str, params: Dict[str, Any]) -> Any:
        """
        POST a typed request to a Komodo route.

        Raises:
            RemoteOperationError: On transport failure or non-2xx response
        """
        endpoint = f"{self.url}/{route}"
        logger.debug("POST %s %s %s", endpoint, request_type, params)
        try:
            response = self.session.post(
                endpoint,
                json={"type": request_type, "params": params},
                timeout=self.request_timeout,
            )
        except requests.exceptions.RequestException as e:
            raise RemoteOperationError(str(e), cause=e)

        if not response.ok:
            raise RemoteOperationError(
                self._error_message(response), status_code=response.status_code
            )

        try:
            return response.json()
        except ValueError as e:
            raise RemoteOperationError(
                f"Invalid JSON in response to {request_type}: {e}",
                status_code=response.status_code,
                cause=e,
            )

    @staticmethod
    def _error_message(response: requests.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict) and body.get("error"):
            return str(body["error"])
        text = (response.text or "").strip()
        if text:
            return text
        return f"{response.status_code} {response.reason}"

    def read(self, request_type: str, params: Dict[str, Any]) -> Any:
        """Issue a read request (e.g. ``GetUpdate``)."""
        return self._request("read", request_type, params)

    def execute(self, request_type: str, params: Dict[str, Any]) -> ExecutionResult:
        """Issue an execute request (e.g. ``DeployStack``)."""
        return self._request("execute", request_type, params)

    def poll_update_until_complete(self, oid: str) -> Dict[str, Any]:
        """
        Poll an Update until its status is Complete.

        Args:
            oid: Update object id

        Returns:
            The completed Update

        Raises:
            PollTimeoutError: If poll_timeout elapses first
        """
        started = time.monotonic()
        while True:
            time.sleep(self.poll_interval)
            update = self.read("GetUpdate", {"id": oid})
            status = update.get("status") if isinstance(update, dict) else None
            if status == UPDATE_STATUS_COMPLETE:
                return update

            logger.debug("Update %s status: %s", oid, status)
            if (
                self.poll_timeout is not None
                and time.monotonic() - started >= self.poll_timeout
            ):
                raise PollTimeoutError(
                    f"Update {oid} did not complete within {self.poll_timeout}s "
                    f"(last status: {status})"
                )

    def _poll_update(self, update: Dict[str, Any]) -> Dict[str, Any]:
        oid = update_id(update)
        if oid is None:
            # Nothing to poll, hand back what Komodo returned.
            return update
        return self.poll_update_until_complete(oid)

    def execute_and_poll(
        self, request_type: str, params: Dict[str, Any]
    ) -> ExecutionResult:
        """
        Execute a request and wait for the resulting update(s) to complete.

        Single executions return the completed Update. Batch executions
        return a list in the original order: ``Ok`` items are replaced by
        their completed Update, ``Err`` items are passed through unchanged.
        """
        result = self.execute(request_type, params)

        if isinstance(result, list):
            polled = []
            for item in result:
                if (
                    isinstance(item, dict)
                    and item.get("status") == BATCH_ITEM_OK
                    and isinstance(item.get("data"), dict)
                ):
                    polled.append(self._poll_update(item["data"]))
                else:
                    polled.append(item)
            return polled

        if isinstance(result, dict):
            return self._poll_update(result)

        return result
