"""Static content for newly created drawings."""

import json

DRAWING_SKELETON = {
    "type": "drawing",
    "version": 2,
    "source": "drawsync",
    "elements": [],
    "appState": {
        "gridSize": None,
        "viewBackgroundColor": "#ffffff",
    },
    "files": {},
}

DRAWING_TEMPLATE = json.dumps(DRAWING_SKELETON, indent=2) + "\n"
