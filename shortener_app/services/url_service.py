import logging
from typing import Optional

from shortener_app.cache.strategies import CacheStrategy
from shortener_app.services.exceptions import (
    DatabaseError,
    EmptyURLError,
    InvalidShortCodeError,
    ShortCodeExistsError,
    ShortCodeNotFoundError,
    URLTooLongError,
)
from shortener_app.services.short_code_strategies import (
    EntropySource,
    RandomShortCodeStrategy,
    is_valid_short_code,
)
from shortener_app.storage.exceptions import (
    DuplicateShortCodeError,
    RecordNotFoundError,
    StorageError,
)
from shortener_app.storage.models import Mapping
from shortener_app.storage.strategies import MappingStorage


logger = logging.getLogger(__name__)

MAX_URL_LENGTH = 8 * 1024


class URLService:
    """
    URL Service with dependency injection for storage, entropy and cache.

    - Storage, entropy source and cache are injected (not created internally)
    - Easy to test (inject a fixed entropy source to force collisions)
    - Holds no mutable state, so one instance serves concurrent callers

    Uniqueness is never checked up front. The service generates a code,
    tries to insert it, and on a conflict tries again with a fresh code.
    """

    def __init__(
        self,
        storage: MappingStorage,
        entropy_source: Optional[EntropySource] = None,
        exists_retry: int = 1,
        cache: Optional[CacheStrategy] = None,
        cache_ttl: int = 3600,
        strict_lookup: bool = False,
    ):
        """
        Initialize URL service with dependencies.

        Args:
            storage: Persistence port holding the mappings
            entropy_source: Callable returning n random bytes
                            (defaults to secrets.token_bytes)
            exists_retry: Extra attempts after a short code collision,
                          values below 1 are treated as 1
            cache: Cache strategy for resolve() (optional)
            cache_ttl: Seconds a resolved URL stays cached
            strict_lookup: Reject lookups that are not 8-char short codes
        """
        self.storage = storage
        if entropy_source is None:
            self.short_code_strategy = RandomShortCodeStrategy()
        else:
            self.short_code_strategy = RandomShortCodeStrategy(entropy_source)
        self.exists_retry = max(exists_retry, 1)
        self.cache = cache
        self.cache_ttl = cache_ttl
        self.strict_lookup = strict_lookup

    @staticmethod
    def validate(long_url: str) -> str:
        """
        Check that the long URL is something we can store.

        Returns the trimmed URL. The URL shape itself is not checked: any
        non-empty string up to MAX_URL_LENGTH characters is accepted.
        """
        long_url = long_url.strip()
        if not long_url:
            raise EmptyURLError()

        if len(long_url) > MAX_URL_LENGTH:
            raise URLTooLongError(len(long_url), MAX_URL_LENGTH)

        return long_url

    def create_short(self, long_url: str) -> str:
        """
        Store a new mapping for long_url and return its short code.

        Always creates a new mapping, even if long_url is already stored.

        Raises:
            EmptyURLError, URLTooLongError: validation failed
            ShortCodeGenerationError: the entropy source failed (not retried)
            ShortCodeExistsError: every attempt collided with a stored code
            DatabaseError: any other storage failure (not retried)
        """
        long_url = self.validate(long_url)

        last_error = None
        for attempt in range(self.exists_retry + 1):
            short_code = self.short_code_strategy.generate()

            try:
                self.storage.insert(short_code, long_url)
            except DuplicateShortCodeError:
                logger.warning(
                    "Short code collision on %s (attempt %d of %d)",
                    short_code, attempt + 1, self.exists_retry + 1,
                )
                last_error = ShortCodeExistsError(short_code)
                continue
            except StorageError as e:
                logger.error("Storing mapping for %s failed: %s", short_code, e)
                raise DatabaseError(e) from e

            logger.info("Created short code %s", short_code)
            return short_code

        logger.error(
            "Gave up after %d colliding short codes", self.exists_retry + 1
        )
        raise last_error

    def resolve(self, short_code: str) -> str:
        """
        Return the long URL stored for short_code, exactly as stored.

        Flow:
        1. Check cache first
        2. On a miss, query storage
        3. Populate cache for next time

        Raises:
            ShortCodeNotFoundError: nothing stored under short_code
            InvalidShortCodeError: strict lookup is on and the code is malformed
            DatabaseError: storage failed
        """
        short_code = self._check_lookup_key(short_code)
        cache_key = f"url:{short_code}"

        if self.cache is not None:
            cached_url = self.cache.get(cache_key)
            if cached_url:
                logger.debug("Cache hit for %s", short_code)
                return cached_url

        try:
            long_url = self.storage.lookup(short_code)
        except RecordNotFoundError as e:
            raise ShortCodeNotFoundError(short_code) from e
        except StorageError as e:
            logger.error("Looking up %s failed: %s", short_code, e)
            raise DatabaseError(e) from e

        if self.cache is not None:
            self.cache.set(cache_key, long_url, ttl=self.cache_ttl)

        return long_url

    def get_mapping(self, short_code: str) -> Mapping:
        """Return the full stored record for short_code. Raises like resolve()."""
        short_code = self._check_lookup_key(short_code)

        try:
            return self.storage.get_mapping(short_code)
        except RecordNotFoundError as e:
            raise ShortCodeNotFoundError(short_code) from e
        except StorageError as e:
            logger.error("Looking up %s failed: %s", short_code, e)
            raise DatabaseError(e) from e

    def _check_lookup_key(self, short_code: str) -> str:
        short_code = short_code.strip()
        # Generated codes are never empty
        if not short_code:
            raise ShortCodeNotFoundError(short_code)
        if self.strict_lookup and not is_valid_short_code(short_code):
            raise InvalidShortCodeError(short_code)
        return short_code
