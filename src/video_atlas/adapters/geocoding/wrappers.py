"""Adapters that present host resolvers with different calling conventions as one async call."""

import asyncio
from collections.abc import Callable

from video_atlas.adapters.geocoding.base import Address, GeocodingBackend

ResultCallback = Callable[[list[Address] | None], None]
CallbackResolver = Callable[[float, float, int, ResultCallback], None]
BlockingResolver = Callable[[float, float, int], list[Address] | None]


def _always_present() -> bool:
    return True


class CallbackGeocodingBackend(GeocodingBackend):
    """Wraps a resolver that delivers its matches through a callback.

    The callback may fire on any thread, synchronously or later. Only its
    first invocation counts.
    """

    def __init__(
        self,
        resolver: CallbackResolver,
        *,
        present: Callable[[], bool] = _always_present,
    ) -> None:
        self._resolver = resolver
        self._present = present

    def is_present(self) -> bool:
        return self._present()

    async def get_from_location(
        self,
        latitude: float,
        longitude: float,
        max_results: int = 1,
    ) -> list[Address]:
        loop = asyncio.get_running_loop()
        future: asyncio.Future[list[Address] | None] = loop.create_future()

        def _deliver(addresses: list[Address] | None) -> None:
            if not future.done():
                future.set_result(addresses)

        def on_result(addresses: list[Address] | None) -> None:
            loop.call_soon_threadsafe(_deliver, addresses)

        self._resolver(latitude, longitude, max_results, on_result)
        addresses = await future
        return list(addresses or [])


class BlockingGeocodingBackend(GeocodingBackend):
    """Wraps a resolver that blocks and returns its matches directly."""

    def __init__(
        self,
        resolver: BlockingResolver,
        *,
        present: Callable[[], bool] = _always_present,
    ) -> None:
        self._resolver = resolver
        self._present = present

    def is_present(self) -> bool:
        return self._present()

    async def get_from_location(
        self,
        latitude: float,
        longitude: float,
        max_results: int = 1,
    ) -> list[Address]:
        addresses = await asyncio.to_thread(self._resolver, latitude, longitude, max_results)
        return list(addresses or [])
