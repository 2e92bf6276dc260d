"""
Saving and loading render contexts as JSON.

The saved document is the whole RenderContext: location, escape function,
colorer and aspect. It is what a snapshot writes next to its image and
what the `render` command reads back to re-render a view.
"""

import json

from loguru import logger

from .render_context import RenderContext


class StateError(ValueError):
    """A persisted render context could not be understood."""

    def __init__(self, source, reason):
        super().__init__(f"{source}: {reason}")
        self.source = str(source)
        self.reason = reason


def context_to_json(rctx):
    return json.dumps(rctx.to_dict(), indent=2)


def context_from_json(text, source="<string>"):
    """
    Parse a render context.

    Raises:
        StateError if the text is not valid JSON or does not describe a
        render context
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise StateError(source, f"invalid JSON: {e}") from e

    if not isinstance(data, dict):
        raise StateError(source, f"expected an object, got {type(data).__name__}")

    try:
        return RenderContext.from_dict(data)
    except KeyError as e:
        raise StateError(source, f"missing field {e}") from e
    except (TypeError, ValueError, IndexError, AttributeError) as e:
        raise StateError(source, f"bad value: {e}") from e


def save_context(rctx, path):
    """Write a render context to `path`. OSErrors propagate."""
    with open(path, 'w', encoding='utf-8') as f:
        f.write(context_to_json(rctx))
    logger.info(f"Render context saved to: {path}")


def load_context(path):
    """Read a render context from `path`. OSErrors propagate."""
    with open(path, 'r', encoding='utf-8') as f:
        try:
            text = f.read()
        except UnicodeDecodeError as e:
            raise StateError(path, f"not UTF-8 text: {e}") from e
    rctx = context_from_json(text, source=path)
    logger.debug(f"Render context loaded from {path}: {rctx}")
    return rctx
