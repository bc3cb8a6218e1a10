# SPDX-License-Identifier: LGPL-3.0-only
# Copyright (c) 2026 Mirrowel

"""
Update state container.

Tracks whether a newer upstream build exists and the caller's remaining
quota / balance. Each remote value is refreshed on demand behind its own
policy:

    get_latest_version   2 minute staleness gate on last_update
    update_usage         1 minute staleness gate on last_update_usage
    update_api2d_usage   no gate, fetches on every call

Attempt timestamps are stamped before the remote call starts, so a slow or
failing fetch keeps the gate closed for the rest of its window. Failures are
logged and never raised to the caller.

Usage:
    store = UpdateStore.create(UpdateStateConfig.from_env())
    await store.refresh_all()
    if store.has_new_version:
        print(store.format_version(store.remote_version))
"""

import asyncio
import functools
import logging
from typing import Any, Callable, Dict, Optional

import httpx

from .core.config import UpdateStateConfig, auth_headers, load_build_info
from .core.constants import (
    DEFAULT_REMOTE_VERSION,
    DEFAULT_VERSION,
    DEFAULT_VERSION_TYPE,
    USAGE_CHECK_INTERVAL_MS,
    VERSION_CHECK_INTERVAL_MS,
)
from .core.errors import ConfigMissingError
from .core.types import BuildInfo, VersionType
from .persistence.storage import StateStorage
from .usage.balance import Api2dBalanceClient
from .usage.gate import Clock, StalenessGate, now_ms
from .usage.metering import MeteringClient, OpenAIMeteringClient
from .version.formatter import format_version
from .version.resolver import VersionResolver

lib_logger = logging.getLogger("update_state")

# attribute name -> persisted field name
_PERSISTED_FIELDS = {
    "version_type": "versionType",
    "last_update": "lastUpdate",
    "version": "version",
    "remote_version": "remoteVersion",
    "used": "used",
    "subscription": "subscription",
    "last_update_usage": "lastUpdateUsage",
    "api2d_balance": "api2dBalance",
}
_TIMESTAMP_FIELDS = ("last_update", "last_update_usage")
_STRING_FIELDS = ("version", "remote_version")
_OPTIONAL_NUMBER_FIELDS = ("used", "subscription", "api2d_balance")
# Raw form depends on the version type
_SCHEME_FIELDS = ("version", "remote_version", "last_update")


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


class UpdateStore:
    """
    Long-lived, persisted update/usage state.

    Collaborators are injected so tests can substitute doubles; use
    ``create`` to wire the default HTTP-backed ones from config.
    """

    def __init__(
        self,
        resolver: VersionResolver,
        metering: MeteringClient,
        balance: Api2dBalanceClient,
        version_type: VersionType = VersionType(DEFAULT_VERSION_TYPE),
        build_info_provider: Callable[[], BuildInfo] = load_build_info,
        storage: Optional[StateStorage] = None,
        clock: Clock = now_ms,
    ):
        self._resolver = resolver
        self._metering = metering
        self._balance = balance
        self._build_info_provider = build_info_provider
        self._storage = storage
        self._version_gate = StalenessGate(VERSION_CHECK_INTERVAL_MS, clock)
        self._usage_gate = StalenessGate(USAGE_CHECK_INTERVAL_MS, clock)

        self.version_type: VersionType = (
            VersionType.parse(version_type) or VersionType(DEFAULT_VERSION_TYPE)
        )
        self.last_update: float = 0
        self.version: str = DEFAULT_VERSION
        self.remote_version: str = DEFAULT_REMOTE_VERSION

        self.used: Optional[float] = None
        self.subscription: Optional[float] = None
        self.last_update_usage: float = 0

        self.api2d_balance: Optional[float] = None

    @classmethod
    def create(
        cls,
        config: Optional[UpdateStateConfig] = None,
        storage: Optional[StateStorage] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        clock: Clock = now_ms,
    ) -> "UpdateStore":
        """
        Build a store with HTTP-backed collaborators and restore saved state.

        Args:
            config: Settings; read from the environment when omitted
            storage: Persistence; defaults to a file at ``config.state_path``
            http_client: Shared client for all remote calls (optional)
            clock: Epoch-ms clock used by the staleness gates
        """
        config = config or UpdateStateConfig.from_env()
        headers_factory = functools.partial(auth_headers, config.api_key)

        store = cls(
            resolver=VersionResolver(
                commit_url=config.commit_url,
                tag_url=config.tag_url,
                http_client=http_client,
                timeout=config.request_timeout,
            ),
            metering=OpenAIMeteringClient(
                base_url=config.metering_base_url,
                headers_factory=headers_factory,
                http_client=http_client,
                timeout=config.request_timeout,
            ),
            balance=Api2dBalanceClient(
                url=config.balance_url,
                headers_factory=headers_factory,
                http_client=http_client,
                timeout=config.request_timeout,
            ),
            version_type=config.version_type,
            storage=storage if storage is not None else StateStorage(config.state_path),
            clock=clock,
        )
        store.restore()
        return store

    # =========================================================================
    # STATE SNAPSHOTS
    # =========================================================================

    def to_dict(self) -> Dict[str, Any]:
        """Persisted form of the state; unknown optional values are omitted."""
        data: Dict[str, Any] = {}
        for attr, key in _PERSISTED_FIELDS.items():
            value = getattr(self, attr)
            if value is None:
                continue
            if isinstance(value, VersionType):
                value = value.value
            data[key] = value
        return data

    def apply_dict(self, data: Dict[str, Any]) -> None:
        """
        Load fields from a persisted snapshot.

        Values of the wrong type are skipped. The configured version type
        always wins over a persisted one; when they differ, the version
        fields and their check stamp stay at defaults so the next
        get_latest_version refetches in the active scheme.
        """
        stored_type = VersionType.parse(data.get("versionType"))
        scheme_changed = stored_type is not None and stored_type != self.version_type
        if scheme_changed:
            lib_logger.info(
                f"Persisted version type '{stored_type.value}' differs from "
                f"configured '{self.version_type.value}'; dropping saved versions"
            )

        for attr in _TIMESTAMP_FIELDS:
            if scheme_changed and attr in _SCHEME_FIELDS:
                continue
            value = data.get(_PERSISTED_FIELDS[attr])
            if _is_number(value):
                setattr(self, attr, value)

        for attr in _STRING_FIELDS:
            if scheme_changed and attr in _SCHEME_FIELDS:
                continue
            value = data.get(_PERSISTED_FIELDS[attr])
            if isinstance(value, str):
                setattr(self, attr, value)

        for attr in _OPTIONAL_NUMBER_FIELDS:
            value = data.get(_PERSISTED_FIELDS[attr])
            if _is_number(value):
                setattr(self, attr, value)

    def restore(self) -> bool:
        """Restore from storage. Returns True if a compatible snapshot was found."""
        if self._storage is None:
            return False
        data = self._storage.load()
        if data is None:
            return False
        self.apply_dict(data)
        lib_logger.debug(f"Restored update state from {self._storage.path}")
        return True

    def _set(self, **fields: Any) -> None:
        """Apply field updates and persist the snapshot if anything changed."""
        changed = False
        for name, value in fields.items():
            if name not in _PERSISTED_FIELDS:
                raise AttributeError(f"Unknown update state field: {name}")
            if getattr(self, name) != value:
                setattr(self, name, value)
                changed = True
        if changed and self._storage is not None:
            self._storage.save(self.to_dict())

    # =========================================================================
    # VERSION
    # =========================================================================

    def format_version(self, raw: str) -> str:
        """Comparable display form of ``raw`` under the active scheme."""
        return format_version(self.version_type, raw)

    @property
    def has_new_version(self) -> bool:
        """True when a known remote build differs from the local one."""
        if not self.remote_version:
            return False
        return self.format_version(self.version) != self.format_version(
            self.remote_version
        )

    def _local_version(self) -> str:
        try:
            build_info = self._build_info_provider()
        except ConfigMissingError as e:
            lib_logger.warning(f"[Local Version] {e}")
            return DEFAULT_VERSION
        return build_info.for_type(self.version_type) or DEFAULT_VERSION

    async def get_latest_version(self, force: bool = False) -> None:
        """
        Refresh the local version and, when due, the upstream version.

        The local version is re-read on every call. The upstream check runs
        at most once per 2 minutes unless ``force`` is set.
        """
        version_type = self.version_type
        self._set(version=self._local_version())

        stamp = self._version_gate.claim(self.last_update, force)
        if stamp is None:
            lib_logger.debug("Upstream version checked recently, skipping")
            return
        self._set(last_update=stamp)

        try:
            remote_id = await self._resolver.get_version(version_type)
        except Exception as e:
            lib_logger.error(f"[Fetch Upstream Commit Id] {e}")
            return

        self._set(
            remote_version=remote_id if remote_id is not None else DEFAULT_REMOTE_VERSION
        )
        lib_logger.info(f"[Got Upstream] {remote_id}")

    # =========================================================================
    # USAGE / BALANCE
    # =========================================================================

    async def update_usage(self, force: bool = False) -> None:
        """Refresh quota used/total, at most once per minute unless forced."""
        stamp = self._usage_gate.claim(self.last_update_usage, force)
        if stamp is None:
            lib_logger.debug("Usage checked recently, skipping")
            return
        self._set(last_update_usage=stamp)

        try:
            usage = await self._metering.usage()
        except Exception as e:
            lib_logger.error(f"[Update Usage] {e}")
            return

        if usage:
            self._set(used=usage.used, subscription=usage.total)

    async def update_api2d_usage(self, force: bool = False) -> None:
        """
        Refresh the prepaid balance.

        Not gated: every call fetches. ``force`` is accepted for symmetry
        with the other refresh operations.
        """
        try:
            balance = await self._balance.check_balance()
        except Exception as e:
            lib_logger.error(f"[Update Api2d Usage] {e}")
            return

        self._set(api2d_balance=balance.total_available)

    async def refresh_all(self, force: bool = False) -> None:
        """Run all three refresh operations concurrently."""
        await asyncio.gather(
            self.get_latest_version(force),
            self.update_usage(force),
            self.update_api2d_usage(force),
        )
