"""
Data-source loading with an explicit readiness channel.

The host supplies descriptors either directly (a list or JSON text) or
through an endpoint callable that delivers them now or later. Callers
subscribe for the result; each subscription is notified at most once and can
be cancelled through the handle ``subscribe`` returns.

Endpoint callables receive two callbacks::

    def endpoint(finish, fail):
        finish([...descriptors...])   # or fail(exc) on error

Retrying a failed load is up to the host: call ``reset`` and subscribe again.
"""

import itertools
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from hashpath.exceptions import DataSourceLoadError, HashpathError
from hashpath.settings import Settings, settings as default_settings
from hashpath.structure.sources import DataSource, not_found_source, parse_data_sources

logger = logging.getLogger(__name__)

ReadyCallback = Callable[[list[DataSource]], None]
ErrorCallback = Callable[[Exception], None]
Endpoint = Callable[[Callable[[Any], None], Callable[[Exception], None]], None]


class LoadState(Enum):
    """Lifecycle of a loader."""

    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    FAILED = "failed"


@dataclass
class Subscription:
    """
    Handle for one pending readiness notification.

    Params:
        token: Identifier of this subscription within its loader
        on_ready: Called with the descriptor list once loaded
        on_error: Called with the error if loading fails
    """

    token: int
    on_ready: ReadyCallback
    on_error: ErrorCallback | None = None
    loader: "DataSourceLoader | None" = field(default=None, repr=False)
    active: bool = True

    def cancel(self) -> None:
        """Stop this subscription from being notified."""
        if self.active and self.loader is not None:
            self.loader.unsubscribe(self)
        self.active = False


class DataSourceLoader:
    """
    Loads data-source descriptors once and shares them with subscribers.

    The first subscription triggers the load. Descriptors are cached after
    a successful or failed load; an empty result is replaced by a single
    "Not Found" placeholder source.
    """

    def __init__(
        self,
        endpoint: Endpoint | str | bytes | list | None = None,
        settings: Settings | None = None,
    ):
        """
        Initialize the loader.

        Params:
            endpoint: Callable endpoint, JSON payload, descriptor list, or
                None for no data sources
            settings: Configuration override
        """
        self.endpoint = endpoint
        self.settings = settings or default_settings
        self._tokens = itertools.count(1)
        self.reset()

    def reset(self) -> None:
        """Forget cached descriptors and drop all pending subscriptions."""
        self.state = LoadState.IDLE
        self.data: list[DataSource] | None = None
        self.error: Exception | None = None
        self._subscriptions: dict[int, Subscription] = {}

    def subscribe(
        self, on_ready: ReadyCallback, on_error: ErrorCallback | None = None
    ) -> Subscription:
        """
        Request the descriptor list.

        If descriptors are already cached ``on_ready`` runs immediately.
        Otherwise the subscription waits for the load, starting it if none
        is in progress.

        Params:
            on_ready: Called with the descriptor list
            on_error: Called with the error if the load fails

        Returns:
            Subscription handle; call ``cancel()`` to stop listening
        """
        subscription = Subscription(
            token=next(self._tokens), on_ready=on_ready, on_error=on_error, loader=self
        )
        if self.data is not None:
            subscription.active = False
            on_ready(self.data)
            return subscription

        self._subscriptions[subscription.token] = subscription
        if self.state is not LoadState.LOADING:
            self._load()
        return subscription

    def unsubscribe(self, subscription: Subscription) -> None:
        self._subscriptions.pop(subscription.token, None)
        subscription.active = False

    def _load(self) -> None:
        self.state = LoadState.LOADING
        endpoint = self.endpoint
        if endpoint is None:
            self.finish([])
        elif callable(endpoint):
            try:
                endpoint(self.finish, self.fail)
            except Exception as e:
                if self.state is not LoadState.LOADING:
                    raise
                self.fail(e)
        else:
            self.finish(endpoint)

    def finish(self, payload: Any) -> None:
        """
        Deliver descriptors and notify every pending subscriber once.

        Params:
            payload: JSON text or descriptor list from the endpoint
        """
        if self.state is not LoadState.LOADING:
            logger.debug("Ignoring data sources delivered while %s", self.state.value)
            return
        try:
            sources = parse_data_sources(payload)
        except HashpathError as e:
            self.fail(e)
            return

        self.data = sources or [not_found_source(self.settings.not_found_name)]
        self.state = LoadState.READY
        for subscription in self._drain():
            self._notify(subscription.on_ready, self.data)

    def fail(self, error: Exception | str) -> None:
        """
        Report a failed load.

        Subscribers still receive the "Not Found" placeholder list so hosts
        can carry on; error callbacks run afterwards. With no error
        callbacks the failure is logged.
        """
        if self.state is not LoadState.LOADING:
            logger.debug("Ignoring load failure while %s", self.state.value)
            return
        if not isinstance(error, Exception):
            error = DataSourceLoadError(str(error))

        self.error = error
        self.data = [not_found_source(self.settings.not_found_name)]
        self.state = LoadState.FAILED
        subscriptions = self._drain()
        for subscription in subscriptions:
            self._notify(subscription.on_ready, self.data)

        error_callbacks = [s.on_error for s in subscriptions if s.on_error]
        for callback in error_callbacks:
            self._notify(callback, error)
        if not error_callbacks:
            logger.error("Failed to load data sources: %s", error)

    @staticmethod
    def _notify(callback: Callable[[Any], None], value: Any) -> None:
        # Every subscriber is notified even when an earlier one raises
        try:
            callback(value)
        except Exception:
            logger.exception("Data-source subscriber %r raised", callback)

    def _drain(self) -> list[Subscription]:
        subscriptions = list(self._subscriptions.values())
        self._subscriptions = {}
        for subscription in subscriptions:
            subscription.active = False
        return subscriptions
