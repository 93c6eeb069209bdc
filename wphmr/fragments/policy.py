"""Content-Security-Policy header fragment."""

from wphmr.config import DisabledPolicy, HmrOptions
from wphmr.fragments.base import Fragment, FragmentName
from wphmr.fragments.php import add_action, guarded_function
from wphmr.origin import Origin

HEADERS_HOOK = "send_headers"
HOOK_PRIORITY = 1


class PolicyFragment(Fragment):
    """Defines ``vite_hmr_csp()`` and hooks it into ``send_headers``.

    Omitted entirely when the policy is disabled. The header line is emitted
    as configured, without validation or escaping.
    """

    name = FragmentName.POLICY
    function_name = "vite_hmr_csp"

    def render(self, origin: Origin, options: HmrOptions) -> str | None:
        if isinstance(options.csp, DisabledPolicy):
            return None

        body = [
            "if ( ! vite_hmr_is_dev() ) { return; }",
            f'header( "{options.csp.header}" );',
        ]
        lines = guarded_function(self.function_name, "void", body)
        lines.append(add_action(HEADERS_HOOK, self.function_name, HOOK_PRIORITY))
        return "\n".join(lines)
