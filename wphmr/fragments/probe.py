"""Dev server reachability probe fragment."""

from wphmr.config import HmrOptions
from wphmr.fragments.base import Fragment, FragmentName
from wphmr.fragments.php import guarded_function
from wphmr.origin import Origin

# Seconds fsockopen waits for the dev server
CONNECT_TIMEOUT = 1


class ProbeFragment(Fragment):
    """Defines ``vite_hmr_is_running()``.

    The result is cached under a per-port key for ``cache_ttl`` seconds. A
    cached negative result is trusted until it expires, so a dev server that
    starts inside that window is picked up on the next miss.
    """

    name = FragmentName.PROBE
    function_name = "vite_hmr_is_running"

    def render(self, origin: Origin, options: HmrOptions) -> str | None:
        cache = options.cache
        body = [
            f"$key    = '{cache.key(origin.port)}';",
            f"$cached = {cache.getter}( $key );",
            "if ( $cached !== false ) { return (bool) $cached; }",
            f"$conn   = @fsockopen( '{origin.host}', {origin.port}, "
            f"$errno, $errstr, {CONNECT_TIMEOUT} );",
            "$result = is_resource( $conn );",
            "if ( $result ) { fclose( $conn ); }",
            f"{cache.setter}( $key, (int) $result, {options.cache_ttl} );",
            "return $result;",
        ]
        return "\n".join(guarded_function(self.function_name, "bool", body))
