"""Client context resolution for viewer telemetry.

Turns raw request metadata into a coarse, bounded-cardinality identity:

    X-Forwarded-For / peer address -> client IP -> ISO country code (or "ZZ")
    User-Agent                     -> (browser, os) from a closed allow-list (or "Other")

The allow-lists are what keep the metric label space bounded no matter how
many distinct IPs or user-agent strings are observed.

Constraints:
- Never fails the caller; the worst case is the "ZZ"/"Other" sentinels
- No network I/O (the geolocation lookup is a local database read)
- The geolocation database is opened once at startup; a failed open
  degrades to the unknown-country resolver for the process lifetime

NOTE: the left-most X-Forwarded-For entry is trusted as the client address.
Any client can forge it; only country-level attribution depends on it.
"""
from dataclasses import dataclass
from typing import Callable, Iterable, Optional, Tuple, Union

import geoip2.database
import user_agents
from geoip2.errors import GeoIP2Error
from loguru import logger
from maxminddb import InvalidDatabaseError


UNKNOWN_COUNTRY = "ZZ"
OTHER = "Other"

KNOWN_BROWSERS = frozenset({"Chrome", "Firefox", "Safari", "Edge"})
KNOWN_OS = frozenset({"Windows", "macOS", "iOS", "Android", "Linux"})

# uap-core family names -> label vocabulary
_BROWSER_ALIASES = {
    "Chrome Mobile": "Chrome",
    "Chrome Mobile iOS": "Chrome",
    "Chrome Mobile WebView": "Chrome",
    "Firefox Mobile": "Firefox",
    "Firefox iOS": "Firefox",
    "Mobile Safari": "Safari",
    "Mobile Safari UI/WKWebView": "Safari",
    "Edge Mobile": "Edge",
}

_OS_ALIASES = {
    "Mac OS X": "macOS",
    "Mac OS": "macOS",
    "Windows 7": "Windows",
    "Windows 8": "Windows",
    "Windows 8.1": "Windows",
    "Windows 10": "Windows",
    "Windows 11": "Windows",
    "Windows XP": "Windows",
    "Windows Vista": "Windows",
    "Ubuntu": "Linux",
    "Debian": "Linux",
    "Fedora": "Linux",
}


@dataclass(frozen=True)
class ClientContext:
    """Per-request viewer identity used to label telemetry."""

    country: str = UNKNOWN_COUNTRY
    browser: str = OTHER
    os: str = OTHER


def extract_client_ip(
    forwarded_for: Union[str, Iterable[str], None],
    peer_address: Optional[str]
) -> str:
    """Pick the client address from X-Forwarded-For, else the transport peer.

    ``forwarded_for`` may be a single header value or all values of a
    repeated header; repeated values are treated as one comma-joined list.
    """
    if forwarded_for is not None and not isinstance(forwarded_for, str):
        forwarded_for = ",".join(forwarded_for)

    if forwarded_for:
        return forwarded_for.split(",")[0].strip()

    return peer_address or ""


class NullCountryResolver:
    """Country resolver used when no geolocation database is available."""

    def country(self, address: str) -> str:
        return UNKNOWN_COUNTRY

    def close(self) -> None:
        pass


class GeoIPCountryResolver:
    """Country resolver backed by a MaxMind database reader.

    Country, City and Enterprise databases all carry a country record, but
    geoip2 only answers each through its own lookup method. ``lookup`` names
    the reader method to use; ``load_country_resolver`` picks it from the
    database metadata.
    """

    def __init__(self, reader, lookup: str = "country"):
        self._reader = reader
        self._lookup = getattr(reader, lookup)

    def country(self, address: str) -> str:
        """Return the ISO country code for ``address`` or ``UNKNOWN_COUNTRY``."""
        if not address:
            return UNKNOWN_COUNTRY

        try:
            response = self._lookup(address)
        except (GeoIP2Error, ValueError):
            # Not in database or malformed address
            return UNKNOWN_COUNTRY
        except Exception as e:
            # Corrupt record, wrong database type, ...; telemetry must not fail
            logger.warning(f"GeoIP lookup failed for {address} ({type(e).__name__}: {e})")
            return UNKNOWN_COUNTRY

        return response.country.iso_code or UNKNOWN_COUNTRY

    def close(self) -> None:
        self._reader.close()


def lookup_method_for(database_type: str) -> str:
    """Name of the geoip2 Reader method that answers ``database_type``."""
    if "Enterprise" in database_type:
        return "enterprise"
    if "City" in database_type:
        return "city"
    return "country"


def load_country_resolver(db_path: Optional[str]):
    """Open the geolocation database once, degrading to NullCountryResolver.

    Args:
        db_path: Path to a MaxMind ``.mmdb`` file, or None

    Returns:
        GeoIPCountryResolver if the database opened, NullCountryResolver otherwise
    """
    if not db_path:
        logger.info(f"GEOIP_DB_PATH not set; viewer country will be '{UNKNOWN_COUNTRY}'")
        return NullCountryResolver()

    try:
        reader = geoip2.database.Reader(db_path)
    except (OSError, InvalidDatabaseError, ValueError) as e:
        logger.warning(f"GeoIP database could not be loaded from {db_path}: {e}")
        return NullCountryResolver()

    database_type = reader.metadata().database_type
    logger.info(f"GeoIP database {database_type} loaded from {db_path}")
    return GeoIPCountryResolver(reader, lookup=lookup_method_for(database_type))


def parse_user_agent(raw: str) -> Tuple[str, str]:
    """Return vendor (browser, os) family names for a User-Agent string.

    Names are mapped onto the label vocabulary where the parser spells them
    differently; anything else is returned as the parser reported it.
    """
    parsed = user_agents.parse(raw or "")
    browser = parsed.browser.family
    os_name = parsed.os.family
    return _BROWSER_ALIASES.get(browser, browser), _OS_ALIASES.get(os_name, os_name)


def normalise_label(name: Optional[str], known: frozenset) -> str:
    """Keep ``name`` only if it is in the closed set ``known``."""
    return name if name in known else OTHER


class ClientContextResolver:
    """Builds a ClientContext from raw request metadata.

    Both collaborators are swappable: any object with ``country(address)``
    serves as the country resolver, and any callable returning a
    (browser, os) pair serves as the user-agent parser.
    """

    def __init__(
        self,
        country_resolver=None,
        user_agent_parser: Callable[[str], Tuple[str, str]] = parse_user_agent
    ):
        self.country_resolver = country_resolver or NullCountryResolver()
        self.user_agent_parser = user_agent_parser

    def resolve(
        self,
        forwarded_for: Union[str, Iterable[str], None] = None,
        peer_address: Optional[str] = None,
        user_agent: Optional[str] = None
    ) -> ClientContext:
        address = extract_client_ip(forwarded_for, peer_address)
        browser, os_name = self.resolve_browser_os(user_agent)
        return ClientContext(
            country=self.country_resolver.country(address),
            browser=browser,
            os=os_name,
        )

    def resolve_browser_os(self, user_agent: Optional[str]) -> Tuple[str, str]:
        """Map a User-Agent onto (browser, os) labels from the closed sets."""
        try:
            browser, os_name = self.user_agent_parser(user_agent or "")
        except Exception as e:
            logger.warning(f"User-Agent parsing failed ({type(e).__name__}: {e}); using '{OTHER}'")
            return OTHER, OTHER

        return normalise_label(browser, KNOWN_BROWSERS), normalise_label(os_name, KNOWN_OS)

    def close(self) -> None:
        self.country_resolver.close()
