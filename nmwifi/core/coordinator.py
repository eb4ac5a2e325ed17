"""Background operation coordinator — runs session effects as asyncio tasks.

Every gateway call runs in its own task and reports back with exactly one
event through `deliver`. Timers (connect timeout, status auto-clear) are
plain `loop.call_later` handles that also deliver events. Cache and settings
writes run in worker threads so the loop never waits on disk.
"""

import asyncio
import logging
from typing import Callable

from nmwifi.core import events as ev
from nmwifi.core.cache import save_cached_access_points
from nmwifi.core.config import save_setting
from nmwifi.core.errors import ErrorKind, GatewayError

logger = logging.getLogger("nmwifi.coordinator")

Deliver = Callable[[ev.Event], None]


class Coordinator:
    def __init__(self, gateway, deliver: Deliver,
                 connect_timeout: float = 30.0,
                 status_clear_delay: float = 3.0,
                 cache_saver: Callable | None = save_cached_access_points,
                 setting_saver: Callable | None = save_setting):
        self.gateway = gateway
        self._deliver = deliver
        self.connect_timeout = connect_timeout
        self.status_clear_delay = status_clear_delay
        self._cache_saver = cache_saver
        self._setting_saver = setting_saver
        self._tasks: set[asyncio.Task] = set()
        self._timers: set[asyncio.TimerHandle] = set()
        self._connect_timers: dict[int, asyncio.TimerHandle] = {}
        self._closed = False

    # ═══════════════════════════════════════════════════════════
    # Dispatch
    # ═══════════════════════════════════════════════════════════

    def run(self, effects: list[ev.Effect]) -> None:
        for effect in effects:
            self.execute(effect)

    def execute(self, effect: ev.Effect) -> None:
        if self._closed:
            logger.debug(f"Coordinator closed; dropping {type(effect).__name__}")
            return

        if isinstance(effect, ev.ScanNetworks):
            self._spawn(
                self._scan(effect),
                lambda e: ev.ScanLoaded(request_id=effect.request_id, error=e),
            )
        elif isinstance(effect, ev.LoadProfiles):
            self._spawn(
                self._profiles(effect),
                lambda e: ev.ProfilesLoaded(request_id=effect.request_id, error=e),
            )
        elif isinstance(effect, ev.LoadRadioStatus):
            self._spawn(
                self._radio_status(effect),
                lambda e: ev.RadioStatusLoaded(request_id=effect.request_id, error=e),
            )
        elif isinstance(effect, ev.SetRadio):
            self._spawn(
                self._set_radio(effect),
                lambda e: ev.RadioStatusLoaded(request_id=effect.request_id,
                                               toggled=True, error=e),
            )
        elif isinstance(effect, ev.Connect):
            self._start_connect_timer(effect)
            self._spawn(
                self._connect(effect),
                lambda e: ev.ConnectFinished(request_id=effect.request_id,
                                             ssid=effect.ssid, error=e),
                done=lambda: self._cancel_connect_timer(effect.request_id),
            )
        elif isinstance(effect, ev.Disconnect):
            self._spawn(
                self._disconnect(effect),
                lambda e: ev.DisconnectFinished(request_id=effect.request_id,
                                                identifier=effect.identifier, error=e),
            )
        elif isinstance(effect, ev.Forget):
            self._spawn(
                self._forget(effect),
                lambda e: ev.ForgetFinished(request_id=effect.request_id,
                                            identifier=effect.identifier, error=e),
            )
        elif isinstance(effect, ev.LoadDeviceDetail):
            self._spawn(
                self._device_detail(effect),
                lambda e: ev.DeviceDetailLoaded(request_id=effect.request_id,
                                                device=effect.device, error=e),
            )
        elif isinstance(effect, ev.ClearStatusLater):
            self._later(self.status_clear_delay,
                        ev.StatusExpired(seq=effect.seq, state=effect.state))
        elif isinstance(effect, ev.SaveCache):
            if self._cache_saver is not None:
                self._offload(self._cache_saver, list(effect.access_points))
        elif isinstance(effect, ev.SaveSetting):
            if self._setting_saver is not None:
                self._offload(self._setting_saver, effect.key, effect.value)
        else:
            logger.warning(f"Unknown effect {effect!r}")

    def _spawn(self, coro, on_error: Callable[[GatewayError], ev.Event],
               done: Callable[[], None] | None = None) -> asyncio.Task:
        async def runner():
            try:
                event = await coro
            except GatewayError as e:
                event = on_error(e)
            except Exception as e:
                logger.exception(f"Unexpected error in background task: {e}")
                event = on_error(GatewayError(f"Unexpected error: {e}", ErrorKind.COMMAND_FAILED))
            if done is not None:
                done()
            self._deliver(event)

        task = asyncio.create_task(runner())
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    def _offload(self, func: Callable, *args) -> None:
        """Run a blocking file write in a worker thread. Nothing is delivered."""
        async def runner():
            try:
                await asyncio.to_thread(func, *args)
            except Exception as e:
                logger.exception(f"Background write failed: {e}")

        task = asyncio.create_task(runner())
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    def _later(self, delay: float, event: ev.Event) -> asyncio.TimerHandle:
        loop = asyncio.get_running_loop()
        handle: asyncio.TimerHandle

        def fire():
            self._timers.discard(handle)
            self._deliver(event)

        handle = loop.call_later(delay, fire)
        self._timers.add(handle)
        return handle

    def _start_connect_timer(self, effect: ev.Connect) -> None:
        self._connect_timers[effect.request_id] = self._later(
            self.connect_timeout,
            ev.ConnectTimedOut(request_id=effect.request_id, ssid=effect.ssid),
        )

    def _cancel_connect_timer(self, request_id: int) -> None:
        handle = self._connect_timers.pop(request_id, None)
        if handle is not None:
            handle.cancel()
            self._timers.discard(handle)

    def shutdown(self) -> None:
        """Cancel timers and outstanding tasks. Results after this are dropped."""
        self._closed = True
        for handle in list(self._timers):
            handle.cancel()
        self._timers.clear()
        self._connect_timers.clear()
        for task in list(self._tasks):
            task.cancel()
        logger.debug("Coordinator shut down")

    # ═══════════════════════════════════════════════════════════
    # Operations
    # ═══════════════════════════════════════════════════════════

    async def _scan(self, effect: ev.ScanNetworks) -> ev.Event:
        aps = await self.gateway.list_access_points(rescan=effect.rescan)
        return ev.ScanLoaded(request_id=effect.request_id, access_points=tuple(aps))

    async def _profiles(self, effect: ev.LoadProfiles) -> ev.Event:
        profiles, active = await asyncio.gather(
            self.gateway.list_connection_profiles(active_only=False),
            self.gateway.list_connection_profiles(active_only=True),
        )
        return ev.ProfilesLoaded(
            request_id=effect.request_id,
            profiles=tuple(profiles),
            active=tuple(active),
        )

    async def _radio_status(self, effect: ev.LoadRadioStatus) -> ev.Event:
        status = await self.gateway.radio_status()
        return ev.RadioStatusLoaded(request_id=effect.request_id, status=status)

    async def _set_radio(self, effect: ev.SetRadio) -> ev.Event:
        if effect.enabled:
            status = await self.gateway.radio_on()
        else:
            status = await self.gateway.radio_off()
        return ev.RadioStatusLoaded(request_id=effect.request_id, status=status, toggled=True)

    async def _connect(self, effect: ev.Connect) -> ev.Event:
        await self.gateway.connect_robustly(
            effect.ssid,
            password=effect.password,
            hidden=effect.hidden,
            recreate_profile=effect.recreate_profile,
        )
        return ev.ConnectFinished(request_id=effect.request_id, ssid=effect.ssid)

    async def _disconnect(self, effect: ev.Disconnect) -> ev.Event:
        await self.gateway.connection_down(effect.identifier)
        return ev.DisconnectFinished(request_id=effect.request_id, identifier=effect.identifier)

    async def _forget(self, effect: ev.Forget) -> ev.Event:
        await self.gateway.connection_delete(effect.identifier)
        return ev.ForgetFinished(request_id=effect.request_id, identifier=effect.identifier)

    async def _device_detail(self, effect: ev.LoadDeviceDetail) -> ev.Event:
        detail = await self.gateway.device_ip_detail(effect.device)
        if detail is None:
            raise GatewayError(f"No details reported for device {effect.device}")
        return ev.DeviceDetailLoaded(request_id=effect.request_id, device=effect.device,
                                     detail=detail)
