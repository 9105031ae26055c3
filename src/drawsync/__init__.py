"""drawsync — keep drawing files, rendered images and documents in step.

Watches a directory of ``.drawing`` files. On every change the external
converter is asked to re-render ``<stem>.drawing.svg`` and the companion
document ``<stem>.drawing.doc`` gets its embedded source block rewritten
with the drawing's raw content.

The embedded block is demarcated:
    ```drawing-source
    { ...raw drawing JSON... }
    ```

Anything outside the block is preserved untouched.
"""

__version__ = "0.1.0"

DRAWING_EXTENSION = ".drawing"
IMAGE_EXTENSION = ".svg"
DOCUMENT_SUFFIX = ".drawing.doc"

# Marker constants used by the block editor and the dispatcher
BLOCK_START = "```drawing-source"
BLOCK_END = "```"
