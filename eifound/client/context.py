from typing import Callable, List, Optional, Set
import asyncio
import logging

from eifound.client.events import EventBus, SignedOut
from eifound.errors import EIFoundError
from eifound.schemas.auth import CurrentUser
from eifound.schemas.profile import ProfileUpdate
from eifound.services import auth as auth_service
from eifound.services.profiles import find_profile, update_profile

logger = logging.getLogger(__name__)

Listener = Callable[[Optional[CurrentUser]], None]


class SessionContext:
    """The signed-in identity, shared by every view.

    Created at application start, refreshed on auth state changes from the
    platform, torn down on sign-out.
    """

    def __init__(self, supabase, bus: Optional[EventBus] = None):
        self.supabase = supabase
        self.bus = bus or EventBus()
        self.user: Optional[CurrentUser] = None
        self.loading = True
        self._listeners: List[Listener] = []
        self._subscription = None
        self._tasks: Set[asyncio.Task] = set()

    @property
    def user_id(self) -> Optional[str]:
        return self.user.id if self.user else None

    def on_change(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)
        return lambda: self._listeners.remove(listener) if listener in self._listeners else None

    def _set_user(self, user: Optional[CurrentUser]) -> None:
        self.user = user
        for listener in list(self._listeners):
            listener(user)

    async def start(self) -> None:
        self._subscription = self.supabase.auth.on_auth_state_change(self._on_auth_state_change)
        session = await self.supabase.auth.get_session()
        await self._load(session.user if session else None)
        self.loading = False

    def _on_auth_state_change(self, event, session) -> None:
        # Profile lookups run outside the auth callback so they don't re-enter the auth client
        task = asyncio.create_task(self._load(session.user if session else None))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _load(self, identity) -> None:
        if identity is None:
            self._set_user(None)
            return
        try:
            profile = await find_profile(self.supabase, identity.id)
        except EIFoundError as e:
            logger.error(f"Error fetching profile for {identity.id}: {e.message}")
            profile = None
        self._set_user(auth_service.build_current_user(identity, profile))

    async def refresh(self) -> Optional[CurrentUser]:
        response = await self.supabase.auth.get_user()
        await self._load(response.user if response else None)
        return self.user

    async def sign_in(self, email: str, password: str) -> Optional[CurrentUser]:
        await auth_service.sign_in(self.supabase, email, password)
        return await self.refresh()

    async def sign_up(self, email: str, password: str, confirm_password: str, name: str) -> None:
        await auth_service.signup(self.supabase, email, password, confirm_password, name)

    async def update_profile(self, updates: ProfileUpdate) -> Optional[CurrentUser]:
        if self.user is None:
            return None
        profile = await update_profile(self.supabase, self.user.id, updates)
        identity = (await self.supabase.auth.get_user()).user
        self._set_user(auth_service.build_current_user(identity, profile))
        return self.user

    async def sign_out(self) -> None:
        user_id = self.user_id
        await auth_service.sign_out(self.supabase)
        await self.close()
        if user_id:
            await self.bus.publish(SignedOut(user_id))

    async def close(self) -> None:
        if self._subscription is not None:
            self._subscription.unsubscribe()
            self._subscription = None
        for task in list(self._tasks):
            task.cancel()
        self._set_user(None)


class ThemeContext:
    """Light/dark preference; listeners are told about every change."""

    def __init__(self, dark: bool = False):
        self.dark = dark
        self._listeners: List[Callable[[bool], None]] = []

    def on_change(self, listener: Callable[[bool], None]) -> Callable[[], None]:
        self._listeners.append(listener)
        return lambda: self._listeners.remove(listener) if listener in self._listeners else None

    def set_dark(self, dark: bool) -> None:
        if dark == self.dark:
            return
        self.dark = dark
        for listener in list(self._listeners):
            listener(dark)

    def toggle(self) -> bool:
        self.set_dark(not self.dark)
        return self.dark

    def close(self) -> None:
        self._listeners.clear()
