"""Vite client injection fragment."""

from wphmr.config import HmrOptions
from wphmr.fragments.base import Fragment, FragmentName
from wphmr.fragments.php import add_action, echo_line, guarded_function
from wphmr.origin import Origin

HEAD_HOOK = "wp_head"
HOOK_PRIORITY = 1

# Path passed to createHotContext for the stylesheet listeners
HOT_CONTEXT_PATH = "/wp-hmr"


def stylesheet_listener(event: str) -> list[str]:
    """JS lines re-fetching every stylesheet when ``event`` fires."""
    return [
        f'hot.on("{event}", () => {{',
        '  document.querySelectorAll("link[rel=stylesheet]").forEach(l => {',
        "    const u = new URL(l.href); "
        'u.searchParams.set("t", Date.now()); l.href = u.toString();',
        "  });",
        "});",
    ]


class InjectorFragment(Fragment):
    """Defines ``vite_hmr_inject()`` and hooks it into ``wp_head``."""

    name = FragmentName.INJECTOR
    function_name = "vite_hmr_inject"

    def render(self, origin: Origin, options: HmrOptions) -> str | None:
        client_url = origin.client_url
        body = [
            "if ( ! vite_hmr_is_dev() || ! vite_hmr_is_running() ) { return; }",
            echo_line(f'<script type="module" src="{client_url}"></script>'),
        ]

        if options.css_reload_events:
            script = [
                '<script type="module">',
                f'import {{ createHotContext }} from "{client_url}";',
                f'const hot = createHotContext("{HOT_CONTEXT_PATH}");',
            ]
            for event in options.css_reload_events:
                script.extend(stylesheet_listener(event))
            script.append("</script>")
            body.extend(echo_line(line) for line in script)

        lines = guarded_function(self.function_name, "void", body)
        lines.append(add_action(HEAD_HOOK, self.function_name, HOOK_PRIORITY))
        return "\n".join(lines)
