"""Assembles the WordPress plugin that wires pages to the Vite dev server."""

from wphmr.config import HmrOptions
from wphmr.fragments import Fragment, default_fragments
from wphmr.logger import get_logger
from wphmr.origin import Origin

logger = get_logger(__name__)

# Fragments are separated by one blank line
FRAGMENT_SEPARATOR = "\n\n"


class TemplateAssembler:
    """Renders fragments in order and joins the ones that produce output."""

    def __init__(self, fragments: list[Fragment] | None = None) -> None:
        self.fragments = fragments if fragments is not None else default_fragments()

    def assemble(self, origin: Origin, options: HmrOptions) -> str:
        blocks: list[str] = []
        rendered: list[str] = []
        for fragment in self.fragments:
            block = fragment.render(origin, options)
            if block is None:
                continue
            blocks.append(block)
            rendered.append(fragment.name.value)

        logger.debug(f"Assembled plugin for {origin} from fragments: {rendered}")
        return FRAGMENT_SEPARATOR.join(blocks) + "\n"


def assemble(origin: Origin | str, options: HmrOptions | None = None) -> str:
    """Generate the plugin source for ``origin``.

    A string origin is parsed first, so an invalid URL raises
    ``InvalidOriginError`` before any text is produced.
    """
    if isinstance(origin, str):
        origin = Origin.parse(origin)
    if options is None:
        options = HmrOptions()
    return TemplateAssembler().assemble(origin, options)
