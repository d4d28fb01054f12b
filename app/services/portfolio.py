"""Session-wide portfolio state and the admin console gate."""

from __future__ import annotations

import asyncio
import logging
import secrets

from ..defaults import default_marquee
from ..models import Catalog, MarqueeItem, Project
from . import mutator, search
from .generator import CatalogGenerator
from .local_cache import LocalCache
from .normalizer import CatalogDecodeError, normalize
from .persistence import PersistenceGateway, SaveOutcome

logger = logging.getLogger(__name__)

PASSWORD_CACHE_KEY = "reelhouse_password"
MIN_PASSWORD_LENGTH = 4


class CatalogNotLoadedError(RuntimeError):
    """Raised when the catalog is accessed before ``start()`` completed."""


class AdminAccessDenied(PermissionError):
    """Raised for a wrong password or an unknown admin session token."""


class PasswordValidationError(ValueError):
    """Raised when a password change is rejected."""


class AdminGate:
    """Plaintext password check guarding the admin console.

    This is a convenience gate for the editing UI, not a security boundary:
    the password lives unhashed in the local cache and is compared as-is.
    """

    def __init__(self, cache: LocalCache, default_password: str):
        self._cache = cache
        self._default_password = default_password
        self._sessions: set[str] = set()

    @property
    def password(self) -> str:
        return self._cache.get(PASSWORD_CACHE_KEY) or self._default_password

    def login(self, password: str) -> str:
        if password != self.password:
            raise AdminAccessDenied("ACCESS DENIED. INVALID CREDENTIALS.")
        token = secrets.token_urlsafe(32)
        self._sessions.add(token)
        return token

    def logout(self, token: str) -> None:
        self._sessions.discard(token)

    def is_authenticated(self, token: str | None) -> bool:
        return bool(token) and token in self._sessions

    def require(self, token: str | None) -> None:
        if not self.is_authenticated(token):
            raise AdminAccessDenied("Admin session required")

    def change_password(self, new_password: str, confirm: str) -> None:
        if new_password != confirm:
            raise PasswordValidationError("Passwords do not match.")
        if len(new_password) < MIN_PASSWORD_LENGTH:
            raise PasswordValidationError("Password too short.")
        self._cache.set(PASSWORD_CACHE_KEY, new_password)
        logger.info("Admin password updated")


class PortfolioService:
    """Owns the loaded catalog and marquee and routes every edit through them."""

    def __init__(
        self,
        persistence: PersistenceGateway,
        generator: CatalogGenerator,
        gate: AdminGate,
    ):
        self._persistence = persistence
        self._generator = generator
        self.gate = gate
        self._catalog: Catalog | None = None
        self._marquee: list[MarqueeItem] = default_marquee()
        self._write_lock = asyncio.Lock()

    @property
    def loaded(self) -> bool:
        return self._catalog is not None

    @property
    def catalog(self) -> Catalog:
        if self._catalog is None:
            raise CatalogNotLoadedError("Catalog has not been loaded yet")
        return self._catalog

    @property
    def marquee(self) -> list[MarqueeItem]:
        return list(self._marquee)

    async def start(self) -> None:
        """Load persisted state, generating a starter catalog when none exists."""

        self._catalog = await self._load_catalog()
        marquee = await self._persistence.load_marquee()
        if marquee is not None:
            self._marquee = marquee

    async def _load_catalog(self) -> Catalog:
        raw = await self._persistence.load_catalog()
        if raw is not None:
            try:
                return normalize(raw)
            except CatalogDecodeError as exc:
                logger.error("Failed to load catalog from storage: %s", exc)

        catalog = await self._generator.generate()
        await self._persistence.save_catalog(catalog)
        return catalog

    def search(self, query: str) -> list[Project]:
        return search.rank(self.catalog.library, query)

    def filter_projects(self, text: str) -> list[Project]:
        return search.filter_projects(self.catalog.library, text)

    async def dispatch(self, command: mutator.Command) -> tuple[Catalog, SaveOutcome]:
        """Apply an admin edit, replace the held catalog and persist it.

        Edits are serialised so saves reach the store in the order applied.
        """

        async with self._write_lock:
            updated = mutator.apply(self.catalog, command)
            self._catalog = updated
            outcome = await self._persistence.save_catalog(updated)
        return updated, outcome

    async def dispatch_marquee(
        self, command: mutator.Command
    ) -> tuple[list[MarqueeItem], SaveOutcome]:
        async with self._write_lock:
            updated = mutator.apply_marquee(self._marquee, command)
            self._marquee = updated
            outcome = await self._persistence.save_marquee(updated)
        return list(updated), outcome
