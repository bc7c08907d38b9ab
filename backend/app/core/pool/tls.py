"""
TLS policy for the app database connection, derived from the connection string.

Supabase endpoints (host name contains "supabase", or the pooler port 6543)
need encryption without certificate chain validation. Any other host that
needs the same must be added to RELAXED_TLS_MARKERS explicitly.

Relaxed means libpq ``sslmode=require``. libpq treats ``require`` as
``verify-ca`` when a root certificate is available (``~/.postgresql/root.crt``
or ``sslrootcert``), so on such hosts the chain is still verified.
"""

from typing import Any, NamedTuple

SUPABASE_HOST_MARKER = "supabase"
SUPABASE_POOLER_PORT_MARKER = ":6543"

RELAXED_TLS_MARKERS: tuple[str, ...] = (
    SUPABASE_HOST_MARKER,
    SUPABASE_POOLER_PORT_MARKER,
)


class TlsPolicy(NamedTuple):
    relaxed_verification: bool = False

    def connect_args(self) -> dict[str, Any]:
        """Driver kwargs for this policy. Strict keeps the URL/driver defaults."""
        if self.relaxed_verification:
            # libpq: encrypt, skip certificate verification
            return {"sslmode": "require"}
        return {}


def select_tls_policy(connection_string: str) -> TlsPolicy:
    """Pure substring check, no network access."""
    relaxed = any(marker in connection_string for marker in RELAXED_TLS_MARKERS)
    return TlsPolicy(relaxed_verification=relaxed)
