"""Development host detection fragment."""

from wphmr.config import HmrOptions
from wphmr.fragments.base import Fragment, FragmentName
from wphmr.fragments.php import guarded_function, php_list
from wphmr.origin import Origin

LITERAL_DEV_HOSTS = ("localhost", "127.0.0.1")


class DevDetectorFragment(Fragment):
    """Defines ``vite_hmr_is_dev()``.

    The request host counts as development when it is one of the literal
    loopback hosts, or when it ends with ``.<pattern>`` for any dev pattern
    (case-insensitive). Literal hosts are checked first.
    """

    name = FragmentName.DEV_DETECTOR
    function_name = "vite_hmr_is_dev"

    def render(self, origin: Origin, options: HmrOptions) -> str | None:
        literal_checks = " || ".join(
            f"$host === '{host}'" for host in LITERAL_DEV_HOSTS
        )
        body = [
            "$host = $_SERVER['HTTP_HOST'] ?? '';",
            f"if ( {literal_checks} ) {{ return true; }}",
            f"foreach ( [ {php_list(options.all_dev_patterns)} ] as $tld ) {{",
            "\tif ( preg_match( '/\\\\.' . $tld . '$/i', $host ) ) { return true; }",
            "}",
            "return false;",
        ]
        return "\n".join(guarded_function(self.function_name, "bool", body))
