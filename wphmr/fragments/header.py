"""Plugin header fragment."""

from wphmr.config import HmrOptions
from wphmr.fragments.base import Fragment, FragmentName
from wphmr.origin import Origin

PLUGIN_NAME = "Vite HMR"
PLUGIN_DESCRIPTION = (
    "Injects Vite dev client for live reload. Auto-generated, do not edit."
)


class HeaderFragment(Fragment):
    """Opening tag and the comment block WordPress reads plugin metadata from."""

    name = FragmentName.HEADER

    def render(self, origin: Origin, options: HmrOptions) -> str | None:
        return "\n".join(
            [
                "<?php",
                "/**",
                f" * Plugin Name: {PLUGIN_NAME}",
                f" * Description: {PLUGIN_DESCRIPTION}",
                " */",
            ]
        )
